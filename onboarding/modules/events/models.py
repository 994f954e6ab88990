# Supabase tables: events, event_participants
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

events:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- event_date: timestamp (not null)
- location: text (nullable)
- max_participants: integer (nullable)
- is_published: boolean (default: false)
- is_active: boolean (default: true)
- created_by: uuid (foreign key to users.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

event_participants:
- id: uuid (primary key)
- event_id: uuid (foreign key to events.id, on delete cascade)
- reference_number: text (unique, generated by register_for_event)
- full_name: text (not null)
- email: text (not null)
- title: text (nullable)
- company: text (nullable)
- gdpr_consent: boolean (not null)
- registration_date: timestamp (default: now())

Database functions:
- register_for_event(p_event_id, p_full_name, p_email, p_title, p_company, p_gdpr_consent)
  inserts a participant, enforces max_participants and returns the row with reference_number
- get_participant_by_reference(p_reference_number) -> ticket row joined with event fields
- get_participants_by_email(p_email) -> ticket rows for every registration of that email
"""
