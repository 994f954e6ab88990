# Supabase table: performance_goals
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- month_year: text (not null) - 'YYYY-MM'
- target_hours: numeric (default: 0)
- target_story_points: numeric (default: 0)
- completed_hours: numeric (default: 0)
- completed_story_points: numeric (default: 0)
- monthly_checklist: jsonb (default: '[]') - [{"title": str, "completed": bool}, ...]
- created_by: uuid (nullable) - owner who set the goal
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique (user_id, month_year)
"""
