# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- github_username: text (not null)
- master_email: text (nullable) - verified company address
- personal_email: text (nullable)
- first_name: text (nullable)
- last_name: text (nullable)
- phone: text (nullable)
- department: text (nullable)
- role: text (nullable)
- is_verified: boolean (default: false)
- is_owner: boolean (default: false) - grants the admin dashboard
- is_store_user: boolean (default: false) - may redeem store products
- store_points: integer (default: 0, >= 0)
- verification_code: text (nullable) - pending OTP
- verification_email: text (nullable) - address the OTP was sent to
- verification_expires: timestamptz (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Row level security lets a user read/update their own row; owners can read all rows.
"""
