from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from admin_panel.core.dependencies import get_session_user
from admin_panel.core.layout import page_context
from admin_panel.core.templating import templates
from admin_panel.database.supabase_client import get_supabase
from admin_panel.modules.auth.routes import render_login
from admin_panel.modules.dashboard.service import DashboardService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    user: Optional[Dict] = Depends(get_session_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Session gate: credential form without a session, overview with one"""
    if user is None:
        return render_login(request)
    return templates.TemplateResponse(request, "dashboard.html", page_context(
        request, "🏠 Dashboard", "Welcome back! Here's your overview.",
        stats=service.get_stats(),
        recent_users=service.recent_users(),
    ))
