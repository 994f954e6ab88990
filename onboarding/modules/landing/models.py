# Supabase tables: landing_pages, landing_sections, landing_components,
# component_properties, component_templates
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

landing_pages:
- id: uuid (primary key)
- title: text (not null)
- subtitle: text (not null)
- is_active: boolean (default: false) - at most one page is active
- created_at / updated_at: timestamp

landing_sections:
- id: uuid (primary key)
- landing_page_id: uuid (foreign key to landing_pages.id)
- section_type: text - hero | welcome | features | process | cta | info | custom
- title: text (not null)
- content: jsonb (default: '{}')
- order_index: integer (default: 0)
- is_visible: boolean (default: true)
- created_at / updated_at: timestamp

landing_components:
- id: uuid (primary key)
- landing_page_id: uuid (foreign key to landing_pages.id)
- component_type: text
- component_name: text (not null)
- component_slug: text - lowercased name, non [a-z0-9] replaced by '-'
- title, subtitle, content: text (nullable)
- data: jsonb (nullable)
- order_index: integer (default: 0)
- is_visible: boolean (default: true)
- background_color, text_color: text (nullable)
- animation_type: text (default: 'none')
- created_at / updated_at: timestamp

component_properties:
- id: uuid (primary key)
- component_id: uuid (foreign key to landing_components.id)
- property_key: text
- property_value: text
- property_type: text - text | number | boolean | url | email | color | image

component_templates:
- id: uuid (primary key)
- template_name: text (not null)
- template_description: text (nullable)
- component_type: text (not null)
- template_data: jsonb (default: '{}')
- is_global: boolean (default: false)
- created_by: uuid (nullable)
- created_at: timestamp
"""
