from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from admin_panel.core.dependencies import require_admin
from admin_panel.core.forms import form_errors
from admin_panel.core.layout import page_context
from admin_panel.core.templating import templates
from admin_panel.database.supabase_client import get_supabase
from admin_panel.modules.ads.schemas import AdCreate, AD_CATEGORIES
from admin_panel.modules.ads.service import AdService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/ads", tags=["ads"])

TITLE = "Advertisements"
SUBTITLE = "Manage ads shown in the app"


def get_ad_service(supabase: Client = Depends(get_supabase)) -> AdService:
    return AdService(supabase)


def render_form(request: Request, form: Dict, ad_id: Optional[int] = None, errors=None, status_code: int = 200):
    return templates.TemplateResponse(request, "ad_form.html", page_context(
        request, TITLE, "Edit Ad" if ad_id else "Create Ad",
        form=form,
        ad_id=ad_id,
        categories=AD_CATEGORIES,
        errors=errors or [],
    ), status_code=status_code)


def ad_form_data(title, description, image_url, action_url, category, is_active) -> Dict:
    return {
        "title": title,
        "description": description,
        "image_url": image_url,
        "action_url": action_url,
        "category": category,
        "is_active": is_active is not None,
    }


@router.get("", response_class=HTMLResponse)
async def list_ads(
    request: Request,
    user_data: Dict = Depends(require_admin),
    service: AdService = Depends(get_ad_service),
):
    return templates.TemplateResponse(request, "ads.html", page_context(
        request, TITLE, SUBTITLE, ads=service.list_all(),
    ))


@router.get("/new", response_class=HTMLResponse)
async def new_ad(request: Request, user_data: Dict = Depends(require_admin)):
    return render_form(request, ad_form_data("", "", "", "", "general", "on"))


@router.post("")
async def create_ad(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    image_url: str = Form(""),
    action_url: str = Form(""),
    category: str = Form("general"),
    is_active: Optional[str] = Form(None),
    user_data: Dict = Depends(require_admin),
    service: AdService = Depends(get_ad_service),
):
    form = ad_form_data(title, description, image_url, action_url, category, is_active)
    try:
        payload = AdCreate(**form)
    except ValidationError as e:
        return render_form(request, form, errors=form_errors(e), status_code=422)
    service.create(payload)
    return RedirectResponse("/ads", status_code=303)


@router.get("/{ad_id}/edit", response_class=HTMLResponse)
async def edit_ad(
    ad_id: int,
    request: Request,
    user_data: Dict = Depends(require_admin),
    service: AdService = Depends(get_ad_service),
):
    ad = service.get_by_id(ad_id)
    form = ad.model_dump()
    for field in ("description", "image_url", "action_url"):
        form[field] = form[field] or ""
    return render_form(request, form, ad_id=ad_id)


@router.post("/{ad_id}")
async def update_ad(
    ad_id: int,
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    image_url: str = Form(""),
    action_url: str = Form(""),
    category: str = Form("general"),
    is_active: Optional[str] = Form(None),
    user_data: Dict = Depends(require_admin),
    service: AdService = Depends(get_ad_service),
):
    form = ad_form_data(title, description, image_url, action_url, category, is_active)
    try:
        payload = AdCreate(**form)
    except ValidationError as e:
        return render_form(request, form, ad_id=ad_id, errors=form_errors(e), status_code=422)
    service.update(ad_id, payload)
    return RedirectResponse("/ads", status_code=303)


@router.post("/{ad_id}/toggle")
async def toggle_ad(
    ad_id: int,
    user_data: Dict = Depends(require_admin),
    service: AdService = Depends(get_ad_service),
):
    service.toggle_active(ad_id)
    return RedirectResponse("/ads", status_code=303)


@router.get("/{ad_id}/delete", response_class=HTMLResponse)
async def confirm_delete_ad(
    ad_id: int,
    request: Request,
    user_data: Dict = Depends(require_admin),
    service: AdService = Depends(get_ad_service),
):
    ad = service.get_by_id(ad_id)
    return templates.TemplateResponse(request, "confirm_delete.html", page_context(
        request, TITLE, SUBTITLE,
        prompt=f"Delete this ad? \"{ad.title}\"",
        action_url=f"/ads/{ad_id}/delete",
        cancel_url="/ads",
    ))


@router.post("/{ad_id}/delete")
async def delete_ad(
    ad_id: int,
    user_data: Dict = Depends(require_admin),
    service: AdService = Depends(get_ad_service),
):
    service.delete(ad_id)
    return RedirectResponse("/ads", status_code=303)
