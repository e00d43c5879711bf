from admin_panel.config.settings import settings
from admin_panel.core.collection import CollectionService
from admin_panel.modules.admins.schemas import (
    AdminCreate, AdminBootstrap, AdminProfileCreate, AdminResponse, ApiKeyUpdate
)
from admin_panel.modules.auth.schemas import RegisterRequest
from admin_panel.modules.auth.service import AuthService
from typing import Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class OrphanedAccountError(Exception):
    """Sign-up succeeded but the admin_users row could not be written."""

    def __init__(self, user_id: str, email: str, reason: str):
        self.user_id = user_id
        self.email = email
        self.reason = reason
        super().__init__(
            f"Account {email} was created but its admin profile could not be saved: {reason}"
        )


class AdminService(CollectionService):
    table = "admin_users"
    response_model = AdminResponse
    label = "Admin"

    def is_admin(self, user_id: str) -> bool:
        admin = self.find_one("id", user_id)
        return admin is not None and admin.is_active is not False

    def get_api_key(self, user_id: str) -> Optional[str]:
        admin = self.find_one("id", user_id)
        if admin is None:
            return None
        return admin.gemini_api_key or None

    def save_api_key(self, user_id: str, api_key: Optional[str]) -> AdminResponse:
        return self.update(user_id, ApiKeyUpdate(gemini_api_key=(api_key or "").strip() or None))

    def _create_profile(self, user_id: str, profile: AdminProfileCreate) -> AdminResponse:
        try:
            return self.create(profile)
        except HTTPException as e:
            logger.error(f"Auth account {user_id} ({profile.email}) has no admin profile: {e.detail}")
            raise OrphanedAccountError(user_id, profile.email, str(e.detail))

    def add_admin(self, data: AdminCreate, auth: AuthService) -> AdminResponse:
        """Sign up a new account and give it an admin profile row"""
        account = auth.register(RegisterRequest(email=data.email, password=data.password))
        admin = self._create_profile(account.user_id, AdminProfileCreate(
            id=account.user_id,
            email=data.email,
            gemini_api_key=data.gemini_api_key or None,
        ))
        logger.info(f"Added admin {admin.email}")
        return admin

    def bootstrap_open(self) -> bool:
        return settings.allow_admin_bootstrap and self.count() == 0

    def bootstrap(self, data: AdminBootstrap, auth: AuthService) -> AdminResponse:
        """First-time setup: sign up the account and insert a super_admin profile"""
        account = auth.register(RegisterRequest(
            email=data.email, password=data.password, full_name=data.full_name
        ))
        admin = self._create_profile(account.user_id, AdminProfileCreate(
            id=account.user_id,
            email=data.email,
            full_name=data.full_name,
            role="super_admin",
        ))
        logger.info(f"Bootstrapped super admin {admin.email}")
        return admin

    def delete_admin(self, admin_id: str, current_user_id: str) -> bool:
        if admin_id == current_user_id:
            raise HTTPException(status_code=400, detail="Cannot delete yourself!")
        removed = self.delete(admin_id)
        logger.info(f"Removed admin {admin_id}")
        return removed
