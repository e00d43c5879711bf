# Supabase table: health_tips
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

health_tips:
- id: bigint (primary key)
- title: text (not null)
- content: text (not null)
- category: text - health | nutrition | fitness | mental | product
- icon: text - always 'favorite' for tips written by the dashboard
- image_url: text (nullable)
- priority: integer (1-10, default: 5)
- is_active: boolean (default: true)
- created_at: timestamp (default: now())

The mobile app shows active tips ordered by priority.
"""
