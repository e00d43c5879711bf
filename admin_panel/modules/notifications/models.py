# Supabase table: notifications
# This file documents the expected database schema

"""
Expected Supabase table structure:

notifications:
- id: bigint (primary key)
- title: text (not null)
- message: text (not null)
- type: text - general | alert | promotion | reminder
- user_id: uuid (nullable, references users.id) - null means broadcast to every user
- is_read: boolean (default: false) - set by the mobile app
- created_at: timestamp (default: now())

The dashboard only creates and deletes notifications; it never edits them.
"""
