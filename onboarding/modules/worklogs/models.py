# Supabase table: worklogs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- title: text (not null)
- description: text (nullable)
- date: date (not null)
- hours: numeric (not null, > 0)
- project: text (nullable)
- category: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
