import httpx
from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from admin_panel.config.settings import settings
from admin_panel.core.dependencies import require_admin
from admin_panel.core.forms import form_errors
from admin_panel.core.layout import page_context
from admin_panel.core.messages import flash
from admin_panel.core.templating import templates
from admin_panel.database.supabase_client import get_supabase
from admin_panel.modules.admins.routes import get_admin_service
from admin_panel.modules.admins.service import AdminService
from admin_panel.modules.tips.generator import TipGenerator, TipGenerationError, DEFAULT_TIP_COUNT, MAX_TIP_COUNT
from admin_panel.modules.tips.schemas import TipCreate, TIP_CATEGORIES
from admin_panel.modules.tips.service import TipService
from supabase import Client
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tips", tags=["tips"])

TITLE = "Health Tips"
SUBTITLE = "Manage and generate health tips with AI"


def get_tip_service(supabase: Client = Depends(get_supabase)) -> TipService:
    return TipService(supabase)


def get_tip_generator():
    with httpx.Client(timeout=settings.gemini_timeout_seconds) as client:
        yield TipGenerator(client)


def render_form(request: Request, form: Dict, tip_id: Optional[int] = None, errors=None, status_code: int = 200):
    return templates.TemplateResponse(request, "tip_form.html", page_context(
        request, TITLE, "Edit Tip" if tip_id else "New Tip",
        form=form,
        tip_id=tip_id,
        categories=TIP_CATEGORIES,
        errors=errors or [],
    ), status_code=status_code)


def tip_form_data(title, content, category, priority, image_url, is_active) -> Dict:
    return {
        "title": title,
        "content": content,
        "category": category,
        "priority": priority,
        "image_url": image_url,
        "is_active": is_active is not None,
    }


@router.get("", response_class=HTMLResponse)
async def list_tips(
    request: Request,
    user_data: Dict = Depends(require_admin),
    service: TipService = Depends(get_tip_service),
    admin_service: AdminService = Depends(get_admin_service),
):
    return templates.TemplateResponse(request, "tips.html", page_context(
        request, TITLE, SUBTITLE,
        tips=service.list_all(),
        has_api_key=bool(admin_service.get_api_key(user_data["id"])),
        default_count=DEFAULT_TIP_COUNT,
        max_count=MAX_TIP_COUNT,
    ))


@router.post("/generate")
def generate_tips(
    request: Request,
    count: str = Form(str(DEFAULT_TIP_COUNT)),
    user_data: Dict = Depends(require_admin),
    service: TipService = Depends(get_tip_service),
    admin_service: AdminService = Depends(get_admin_service),
    generator: TipGenerator = Depends(get_tip_generator),
):
    """Generate tips with Gemini and insert them in one batch"""
    try:
        api_key = admin_service.get_api_key(user_data["id"])
        tips = service.generate_and_insert(generator, count, api_key)
    except TipGenerationError as e:
        logger.warning(f"AI tip generation failed: {e}")
        flash(request, f"Error: {e}", "error")
    except HTTPException as e:
        flash(request, f"Error: {e.detail}", "error")
    else:
        flash(request, f"Added {len(tips)} tips!")
    return RedirectResponse("/tips", status_code=303)


@router.get("/new", response_class=HTMLResponse)
async def new_tip(request: Request, user_data: Dict = Depends(require_admin)):
    return render_form(request, tip_form_data("", "", "health", 5, "", "on"))


@router.post("")
async def create_tip(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    category: str = Form("health"),
    priority: str = Form("5"),
    image_url: str = Form(""),
    is_active: Optional[str] = Form(None),
    user_data: Dict = Depends(require_admin),
    service: TipService = Depends(get_tip_service),
):
    form = tip_form_data(title, content, category, priority, image_url, is_active)
    try:
        payload = TipCreate(**form)
    except ValidationError as e:
        return render_form(request, form, errors=form_errors(e), status_code=422)
    service.create(payload)
    return RedirectResponse("/tips", status_code=303)


@router.get("/{tip_id}/edit", response_class=HTMLResponse)
async def edit_tip(
    tip_id: int,
    request: Request,
    user_data: Dict = Depends(require_admin),
    service: TipService = Depends(get_tip_service),
):
    tip = service.get_by_id(tip_id)
    return render_form(request, {**tip.model_dump(), "image_url": tip.image_url or ""}, tip_id=tip_id)


@router.post("/{tip_id}")
async def update_tip(
    tip_id: int,
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    category: str = Form("health"),
    priority: str = Form("5"),
    image_url: str = Form(""),
    is_active: Optional[str] = Form(None),
    user_data: Dict = Depends(require_admin),
    service: TipService = Depends(get_tip_service),
):
    form = tip_form_data(title, content, category, priority, image_url, is_active)
    try:
        payload = TipCreate(**form)
    except ValidationError as e:
        return render_form(request, form, tip_id=tip_id, errors=form_errors(e), status_code=422)
    service.update(tip_id, payload)
    return RedirectResponse("/tips", status_code=303)


@router.post("/{tip_id}/toggle")
async def toggle_tip(
    tip_id: int,
    user_data: Dict = Depends(require_admin),
    service: TipService = Depends(get_tip_service),
):
    service.toggle_active(tip_id)
    return RedirectResponse("/tips", status_code=303)


@router.get("/{tip_id}/delete", response_class=HTMLResponse)
async def confirm_delete_tip(
    tip_id: int,
    request: Request,
    user_data: Dict = Depends(require_admin),
    service: TipService = Depends(get_tip_service),
):
    tip = service.get_by_id(tip_id)
    return templates.TemplateResponse(request, "confirm_delete.html", page_context(
        request, TITLE, SUBTITLE,
        prompt=f"Delete this tip? \"{tip.title}\"",
        action_url=f"/tips/{tip_id}/delete",
        cancel_url="/tips",
    ))


@router.post("/{tip_id}/delete")
async def delete_tip(
    tip_id: int,
    user_data: Dict = Depends(require_admin),
    service: TipService = Depends(get_tip_service),
):
    service.delete(tip_id)
    return RedirectResponse("/tips", status_code=303)
