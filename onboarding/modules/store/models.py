# Supabase tables: store_products, store_transactions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

store_products:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- image_url: text (nullable)
- product_code: text (not null, unique)
- point_cost: integer (not null, > 0)
- quantity: integer (default: 0) - units left in stock
- is_active: boolean (default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

store_transactions:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id)
- product_id: uuid (foreign key to store_products.id)
- point_cost: integer (not null)
- points_balance_after: integer (not null)
- status: text - 'completed' | 'cancelled'
- metadata: jsonb (nullable) - product name/code snapshot
- created_at: timestamp (default: now())

Database functions:
- purchase_store_product(p_product_id, p_user_id)
  locks the user and product rows, rejects inactive, out of stock or unaffordable
  products, decrements store_points and quantity, inserts a completed
  store_transactions row and returns transaction_id, user_id, product_id,
  product_name, product_code, point_cost, store_points_remaining, status, created_at
"""
