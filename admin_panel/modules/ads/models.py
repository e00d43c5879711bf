# Supabase table: ads
# This file documents the expected database schema

"""
Expected Supabase table structure:

ads:
- id: bigint (primary key)
- title: text (not null)
- description: text (nullable)
- image_url: text (nullable)
- action_url: text (nullable) - opened when the ad is tapped in the app
- category: text - general | health | fitness | nutrition | product
- is_active: boolean (default: true)
- created_at: timestamp (default: now())
"""
