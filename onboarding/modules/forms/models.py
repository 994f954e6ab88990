# Supabase tables: forms, form_questions, form_question_options,
# form_submissions, form_answers
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

forms:
- id: uuid (primary key)
- created_by / owner_user_id: uuid (foreign key to users.id)
- title: text (not null)
- description: text (nullable)
- slug: text (unique, [a-z0-9-])
- is_internal: boolean (default: true) - only signed-in users may submit
- status: text - active | inactive | closed (default: inactive)
- gdpr_consent_text: text (not null)
- submission_limit: integer (nullable)
- start_at / end_at: timestamp (nullable) - submission window
- confirmation_message / redirect_url: text (nullable)
- email_notify_on_new_response: boolean (default: false)
- email_summary_frequency: text - none | daily | weekly
- collect_submitter_email: boolean (default: false)
- created_at / updated_at: timestamp

form_questions:
- id: uuid (primary key)
- form_id: uuid (foreign key to forms.id, on delete cascade)
- order_index: integer
- type: text - short_text | long_text | multiple_choice | checkboxes | dropdown |
  url | date | time | email | number | file_upload
- label: text (not null)
- description: text (nullable)
- required: boolean (default: false)
- settings: jsonb (default: '{}')
- is_active: boolean (default: true)

form_question_options:
- id: uuid (primary key)
- question_id: uuid (foreign key to form_questions.id, on delete cascade)
- order_index: integer
- label / value: text
- is_other: boolean (default: false) - accepts free text

form_submissions:
- id: uuid (primary key)
- form_id: uuid (foreign key to forms.id, on delete cascade)
- status: text - complete | incomplete
- submitter_user_id: uuid (nullable)
- submitter_email: text (nullable)
- submitter_ip: text
- user_agent: text (nullable)
- consent_checked: boolean
- consent_text_snapshot: text - gdpr_consent_text at submission time
- created_at / completed_at: timestamp

form_answers:
- id: uuid (primary key)
- submission_id: uuid (foreign key to form_submissions.id, on delete cascade)
- question_id: uuid (foreign key to form_questions.id)
- value_text, value_email, value_url, value_date, value_time: text (nullable)
- value_number: numeric (nullable)
- value_json / files: jsonb (nullable)
- selected_options: text[] (nullable)
"""
