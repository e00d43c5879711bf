from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from admin_panel.config.settings import settings
from admin_panel.core.dependencies import require_admin, get_auth_service
from admin_panel.core.forms import form_errors
from admin_panel.core.layout import page_context
from admin_panel.core.messages import flash
from admin_panel.core.templating import templates
from admin_panel.database.supabase_client import get_supabase
from admin_panel.modules.admins.schemas import AdminCreate, AdminBootstrap
from admin_panel.modules.admins.service import AdminService, OrphanedAccountError
from admin_panel.modules.auth.service import AuthService
from supabase import Client
from typing import Dict

router = APIRouter(tags=["admins"])

PROFILE_TITLE = "👤 Admin Profile"
PROFILE_SUBTITLE = "Manage your account, API keys, and admin users"


def get_admin_service(supabase: Client = Depends(get_supabase)) -> AdminService:
    return AdminService(supabase)


@router.get("/profile", response_class=HTMLResponse)
async def profile(
    request: Request,
    user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Current admin, API key management and the admin list"""
    return templates.TemplateResponse(request, "profile.html", page_context(
        request, PROFILE_TITLE, PROFILE_SUBTITLE,
        current_user=user,
        api_key=service.get_api_key(user["id"]) or "",
        admins=service.list_all(),
    ))


@router.post("/profile/api-key")
async def save_api_key(
    request: Request,
    api_key: str = Form(""),
    user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.save_api_key(user["id"], api_key)
    flash(request, "API Key saved successfully!")
    return RedirectResponse("/profile", status_code=303)


def render_admin_form(request: Request, email: str = "", errors=None, status_code: int = 200):
    return templates.TemplateResponse(request, "admin_form.html", page_context(
        request, PROFILE_TITLE, "Add a new admin", email=email, errors=errors or [],
    ), status_code=status_code)


@router.get("/profile/admins/new", response_class=HTMLResponse)
async def new_admin(request: Request, user: Dict = Depends(require_admin)):
    return render_admin_form(request)


@router.post("/profile/admins")
async def add_admin(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    gemini_api_key: str = Form(""),
    user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        data = AdminCreate(email=email, password=password, gemini_api_key=gemini_api_key or None)
    except ValidationError as e:
        return render_admin_form(request, email, form_errors(e), status_code=422)
    try:
        service.add_admin(data, auth)
    except HTTPException as e:
        return render_admin_form(request, email, [e.detail], status_code=e.status_code)
    except OrphanedAccountError as e:
        flash(request, str(e), "error")
        return RedirectResponse("/profile", status_code=303)
    flash(request, "New admin added successfully!")
    return RedirectResponse("/profile", status_code=303)


@router.get("/profile/admins/{admin_id}/delete", response_class=HTMLResponse)
async def confirm_delete_admin(
    admin_id: str,
    request: Request,
    user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    if admin_id == user["id"]:
        raise HTTPException(status_code=400, detail="Cannot delete yourself!")
    admin = service.get_by_id(admin_id)
    return templates.TemplateResponse(request, "confirm_delete.html", page_context(
        request, PROFILE_TITLE, PROFILE_SUBTITLE,
        prompt=f"Delete admin {admin.email}?",
        action_url=f"/profile/admins/{admin_id}/delete",
        cancel_url="/profile",
    ))


@router.post("/profile/admins/{admin_id}/delete")
async def delete_admin(
    admin_id: str,
    request: Request,
    user: Dict = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_admin(admin_id, user["id"])
    return RedirectResponse("/profile", status_code=303)


def render_bootstrap(request: Request, status_code: int = 200, **context):
    context.setdefault("full_name", "")
    context.setdefault("email", "")
    context.setdefault("errors", [])
    return templates.TemplateResponse(
        request,
        "create_admin.html",
        {"request": request, "app_name": settings.app_name, **context},
        status_code=status_code,
    )


def ensure_bootstrap_open(service: AdminService = Depends(get_admin_service)) -> AdminService:
    if not service.bootstrap_open():
        raise HTTPException(status_code=403, detail="Admin setup is closed. Sign in with an existing admin account.")
    return service


@router.get("/create-admin", response_class=HTMLResponse)
async def create_admin_page(
    request: Request,
    service: AdminService = Depends(ensure_bootstrap_open),
):
    """First-time admin setup"""
    return render_bootstrap(request)


@router.post("/create-admin", response_class=HTMLResponse)
async def create_admin(
    request: Request,
    full_name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    service: AdminService = Depends(ensure_bootstrap_open),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        data = AdminBootstrap(full_name=full_name, email=email, password=password)
    except ValidationError as e:
        return render_bootstrap(request, 422, full_name=full_name, email=email, errors=form_errors(e))
    try:
        service.bootstrap(data, auth)
    except HTTPException as e:
        return render_bootstrap(request, e.status_code, full_name=full_name, email=email, errors=[e.detail])
    except OrphanedAccountError as e:
        return render_bootstrap(request, 500, warning=str(e))
    return render_bootstrap(
        request,
        message="Admin account created successfully! Check email for verification, then sign in.",
    )
