# Supabase tables: checklist_status, dynamic_checklists, user_checklist_assignments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

checklist_status:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- step_name: text (not null) - id from catalogue.ONBOARDING_CHECKLIST
- completed: boolean (default: false)
- completed_at: timestamp (nullable)
- updated_at: timestamp (nullable)
- unique (user_id, step_name)

dynamic_checklists:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- category: text (not null)
- is_global: boolean (default: false) - applies to every user
- is_active: boolean (default: true)
- created_by: uuid (foreign key to users.id, nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

user_checklist_assignments:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- checklist_id: uuid (foreign key to dynamic_checklists.id ON DELETE CASCADE)
- assigned_by: uuid (nullable)
- assigned_at: timestamp (default: now())
- is_required: boolean (default: false)
- due_date: date (nullable)
- completed_at: timestamp (nullable)
- notes: text (nullable)
"""
