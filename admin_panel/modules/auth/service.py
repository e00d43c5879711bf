import hashlib
import logging
import time
from fastapi import HTTPException
from supabase import Client
from typing import Any, Dict, Optional, Tuple

from admin_panel.modules.auth.schemas import LoginRequest, RegisterRequest, RegisterResponse, TokenResponse

logger = logging.getLogger(__name__)


class SessionUserCache:
    """Token -> user lookups kept for a short while so page renders skip Supabase Auth."""

    def __init__(self, ttl_seconds: float = 60, max_size: int = 500):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._entries: Dict[str, Tuple[Dict[str, Any], float]] = {}

    @staticmethod
    def _key(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(self._key(token))
        if entry is None:
            return None
        user, expires_at = entry
        if time.monotonic() >= expires_at:
            self._entries.pop(self._key(token), None)
            return None
        return user

    def _purge_expired(self, now: float) -> None:
        for key in [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]:
            del self._entries[key]

    def put(self, token: str, user: Dict[str, Any]) -> None:
        now = time.monotonic()
        if len(self._entries) >= self.max_size:
            self._purge_expired(now)
        while self._entries and len(self._entries) >= self.max_size:
            # oldest insertion goes first
            self._entries.pop(next(iter(self._entries)))
        self._entries[self._key(token)] = (user, now + self.ttl_seconds)

    def drop(self, token: str) -> None:
        self._entries.pop(self._key(token), None)

    def clear(self) -> None:
        self._entries.clear()


_user_cache = SessionUserCache()


def backend_message(e: Exception) -> str:
    """Message text of a Supabase error, as the backend phrased it."""
    return getattr(e, "message", None) or str(e)


def clear_auth_cache():
    _user_cache.clear()


def _session_tokens(auth_response, fallback_email: str = "") -> TokenResponse:
    if not auth_response.user or not auth_response.session:
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    return TokenResponse(
        access_token=auth_response.session.access_token,
        refresh_token=auth_response.session.refresh_token,
        user_id=auth_response.user.id,
        email=auth_response.user.email or fallback_email,
    )


class AuthService:
    """Supabase Auth calls. Always built on the anon-key client."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, data: RegisterRequest) -> RegisterResponse:
        metadata = {"full_name": data.full_name} if data.full_name else {}
        try:
            response = self.supabase.auth.sign_up({
                "email": data.email,
                "password": data.password,
                "options": {"data": metadata},
            })
        except Exception as e:
            logger.info(f"Sign-up failed for {data.email}: {e}")
            raise HTTPException(status_code=400, detail=backend_message(e))

        if not response.user:
            raise HTTPException(status_code=400, detail="Failed to create account")
        logger.info(f"Signed up auth account {response.user.id}")
        return RegisterResponse(
            user_id=response.user.id,
            email=response.user.email or data.email,
            message="Account created",
        )

    def login(self, data: LoginRequest) -> TokenResponse:
        """Password sign-in. Failures carry the backend's own error text."""
        try:
            response = self.supabase.auth.sign_in_with_password({
                "email": data.email,
                "password": data.password,
            })
        except Exception as e:
            logger.info(f"Sign-in failed for {data.email}: {e}")
            raise HTTPException(status_code=401, detail=backend_message(e))
        tokens = _session_tokens(response, data.email)
        logger.info(f"Signed in {tokens.user_id}")
        return tokens

    def refresh(self, refresh_token: str) -> TokenResponse:
        try:
            response = self.supabase.auth.refresh_session(refresh_token)
        except Exception as e:
            raise HTTPException(status_code=401, detail=backend_message(e))
        return _session_tokens(response)

    def get_current_user(self, token: str) -> Dict[str, Any]:
        cached = _user_cache.get(token)
        if cached is not None:
            return cached
        try:
            response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.debug(f"Token rejected: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        if not response or not response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        user = {
            "id": response.user.id,
            "email": response.user.email,
            "user_metadata": response.user.user_metadata or {},
        }
        _user_cache.put(token, user)
        return user

    def logout(self, token: Optional[str] = None) -> bool:
        """Revoke the session behind `token` only; other admins stay signed in."""
        if not token:
            return False
        _user_cache.drop(token)
        try:
            self.supabase.auth.admin.sign_out(token, scope="local")
        except Exception as e:
            logger.warning(f"Sign-out call failed: {e}")
            return False
        return True
