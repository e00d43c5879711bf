# Supabase table: admin_users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

admin_users:
- id: uuid (primary key, references auth.users.id)
- email: text (not null)
- full_name: text (nullable)
- role: text (default: 'admin') - 'super_admin' for the bootstrap account
- gemini_api_key: text (nullable) - used by AI tip generation
- is_active: boolean (default: true)
- created_at: timestamp (default: now())

Only auth users with an active admin_users row may sign in to the dashboard.
"""
