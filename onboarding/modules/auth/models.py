# Supabase Auth
# This module uses Supabase's built-in authentication system with the
# GitHub OAuth provider. No custom tables are required for sign-in itself:
# Supabase Auth handles
# - the OAuth redirect and PKCE code exchange (auth.users table)
# - session management and JWT issuance
#
# On first sign-in the portal provisions a row in public.users
# (see modules/users/models.py) keyed by auth.users.id.

"""
Supabase Auth provides:
- auth.sign_in_with_oauth({"provider": "github"}) - Build the authorize URL
- auth.exchange_code_for_session() - Trade the callback code for a session
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

GitHub identity fields arrive in user_metadata:
- user_name / preferred_username: GitHub login
- full_name, avatar_url, email
"""
