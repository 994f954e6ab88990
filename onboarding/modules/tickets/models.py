# Supabase table: tickets
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null) - submitter
- title: text (not null)
- description: text (not null)
- category: text (not null) - values: technical, onboarding, account, bug, feature, other
- priority: text (not null, default: 'medium') - values: low, medium, high, urgent
- status: text (not null, default: 'open') - values: open, in_progress, resolved, closed
- assigned_to: uuid (nullable)
- resolution_notes: text (nullable)
- resolved_at: timestamp (nullable) - set when status becomes resolved
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
