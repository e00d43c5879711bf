"""
Core dependencies for the session gate
"""

from fastapi import Depends, HTTPException, Request
from admin_panel.database.supabase_client import get_auth_client
from admin_panel.modules.auth.schemas import TokenResponse
from admin_panel.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

SESSION_KEYS = ("access_token", "refresh_token", "user_id", "email")


class NotAuthenticated(Exception):
    """Raised when a protected screen is requested without a valid session."""


def get_auth_service(supabase: Client = Depends(get_auth_client)) -> AuthService:
    return AuthService(supabase)


def store_session(request: Request, tokens: TokenResponse) -> None:
    request.session["access_token"] = tokens.access_token
    request.session["refresh_token"] = tokens.refresh_token
    request.session["user_id"] = tokens.user_id
    request.session["email"] = tokens.email


def clear_session(request: Request) -> None:
    for key in SESSION_KEYS:
        request.session.pop(key, None)


def get_session_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """Current admin from the session cookie, or None. Never touches table data."""
    token = request.session.get("access_token")
    if not token:
        return None
    try:
        return auth_service.get_current_user(token)
    except HTTPException:
        pass
    refresh_token = request.session.get("refresh_token")
    if refresh_token:
        try:
            tokens = auth_service.refresh(refresh_token)
            store_session(request, tokens)
            return auth_service.get_current_user(tokens.access_token)
        except HTTPException as e:
            logger.info(f"Session refresh failed: {e.detail}")
    clear_session(request)
    return None


def require_admin(user: Optional[Dict[str, Any]] = Depends(get_session_user)) -> Dict[str, Any]:
    """Dependency for every protected screen; unauthenticated requests go back to the login gate."""
    if user is None:
        raise NotAuthenticated()
    return user
