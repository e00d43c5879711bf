from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from admin_panel.config.settings import settings
from admin_panel.core.dependencies import get_auth_service, store_session, clear_session
from admin_panel.core.rate_limit import limiter
from admin_panel.core.templating import templates
from admin_panel.modules.admins.routes import get_admin_service
from admin_panel.modules.admins.service import AdminService
from admin_panel.modules.auth.schemas import LoginRequest
from admin_panel.modules.auth.service import AuthService
from typing import Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def render_login(request: Request, email: str = "", error: Optional[str] = None, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "login.html",
        {"request": request, "email": email, "error": error, "app_name": settings.app_name},
        status_code=status_code,
    )


@router.post("/login", response_class=HTMLResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    service: AuthService = Depends(get_auth_service),
    admin_service: AdminService = Depends(get_admin_service),
):
    """Password sign-in from the dashboard gate"""
    try:
        login_data = LoginRequest(email=email, password=password)
    except ValidationError:
        return render_login(request, email, "Enter a valid email and password.", status_code=422)

    try:
        tokens = service.login(login_data)
    except HTTPException as e:
        return render_login(request, email, e.detail, status_code=e.status_code)

    if settings.admin_only and not admin_service.is_admin(tokens.user_id):
        logger.warning(f"Sign-in refused for non-admin {tokens.email}")
        service.logout(tokens.access_token)
        return render_login(request, email, "This account does not have admin access.", status_code=403)

    store_session(request, tokens)
    return RedirectResponse("/", status_code=303)


@router.post("/logout")
async def logout(
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    """Sign out and tear down the session cookie"""
    service.logout(request.session.get("access_token"))
    clear_session(request)
    return RedirectResponse("/", status_code=303)
