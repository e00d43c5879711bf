# Supabase tables: users, step_count
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Rows are written by the mobile app; the dashboard only reads them.

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- email: text
- name: text (nullable)
- full_name: text (nullable)
- avatar_url: text (nullable)
- profile_image: text (nullable)
- created_at: timestamp (default: now())

step_count:
- id: bigint (primary key)
- user_id: uuid (references users.id)
- steps: integer
- distance_meters: numeric
- calories_burned: numeric
- created_at: timestamp (default: now())
"""
