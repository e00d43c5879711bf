# Supabase Auth
# The dashboard relies on Supabase's built-in authentication system.
# No custom tables are required for sign-in itself - Supabase Auth handles:
# - Account sign-up (auth.users table)
# - Password sign-in and session issuance
# - JWT validation
# - Sign-out

"""
Supabase Auth calls used by the dashboard:
- auth.sign_in_with_password() - credential form on the dashboard gate
- auth.get_user(jwt=...) - validate the access token kept in the session cookie
- auth.refresh_session() - renew an expired access token from the refresh token
- auth.sign_up() - admin bootstrap and "add admin" on the profile screen
- auth.sign_out() - sidebar sign-out button

Dashboard access additionally requires a row in admin_users whose id is the
auth user's id (see modules/admins/models.py).
"""
