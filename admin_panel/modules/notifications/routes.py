from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from admin_panel.core.dependencies import require_admin
from admin_panel.core.forms import form_errors
from admin_panel.core.layout import page_context
from admin_panel.core.messages import flash
from admin_panel.core.templating import templates
from admin_panel.database.supabase_client import get_supabase
from admin_panel.modules.notifications.schemas import NotificationCreate, NOTIFICATION_TYPES, BROADCAST_TARGET
from admin_panel.modules.notifications.service import NotificationService
from admin_panel.modules.users.routes import get_user_service
from admin_panel.modules.users.service import UserService
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/notifications", tags=["notifications"])

TITLE = "🔔 Notifications"
SUBTITLE = "Send notifications to app users"


def get_notification_service(supabase: Client = Depends(get_supabase)) -> NotificationService:
    return NotificationService(supabase)


def render_form(request: Request, form: Dict, users, errors=None, status_code: int = 200):
    return templates.TemplateResponse(request, "notification_form.html", page_context(
        request, TITLE, "Broadcast or send to specific user",
        form=form,
        users=users,
        types=NOTIFICATION_TYPES,
        broadcast=BROADCAST_TARGET,
        errors=errors or [],
    ), status_code=status_code)


@router.get("", response_class=HTMLResponse)
async def list_notifications(
    request: Request,
    user_data: Dict = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
    user_service: UserService = Depends(get_user_service),
):
    users = {u.id: u for u in user_service.list_targets()}
    return templates.TemplateResponse(request, "notifications.html", page_context(
        request, TITLE, SUBTITLE,
        notifications=service.list_all(),
        users=users,
    ))


@router.get("/new", response_class=HTMLResponse)
async def new_notification(
    request: Request,
    user_data: Dict = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    form = {"title": "", "message": "", "type": "general", "user_id": BROADCAST_TARGET}
    return render_form(request, form, user_service.list_targets())


@router.post("")
async def send_notification(
    request: Request,
    title: str = Form(""),
    message: str = Form(""),
    type: str = Form("general"),
    user_id: str = Form(BROADCAST_TARGET),
    user_data: Dict = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
    user_service: UserService = Depends(get_user_service),
):
    form = {"title": title, "message": message, "type": type, "user_id": user_id}
    try:
        payload = NotificationCreate(**form)
    except ValidationError as e:
        return render_form(request, form, user_service.list_targets(), errors=form_errors(e), status_code=422)
    service.create(payload)
    flash(request, "Notification sent successfully!")
    return RedirectResponse("/notifications", status_code=303)


@router.get("/{notification_id}/delete", response_class=HTMLResponse)
async def confirm_delete_notification(
    notification_id: int,
    request: Request,
    user_data: Dict = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
):
    notification = service.get_by_id(notification_id)
    return templates.TemplateResponse(request, "confirm_delete.html", page_context(
        request, TITLE, SUBTITLE,
        prompt=f"Delete this notification? \"{notification.title}\"",
        action_url=f"/notifications/{notification_id}/delete",
        cancel_url="/notifications",
    ))


@router.post("/{notification_id}/delete")
async def delete_notification(
    notification_id: int,
    user_data: Dict = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
):
    service.delete(notification_id)
    return RedirectResponse("/notifications", status_code=303)
