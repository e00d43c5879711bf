from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from admin_panel.core.dependencies import require_admin
from admin_panel.core.layout import page_context
from admin_panel.core.templating import templates
from admin_panel.database.supabase_client import get_supabase
from admin_panel.modules.users.aggregation import filter_users, summarize, initials
from admin_panel.modules.users.service import UserService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_class=HTMLResponse)
async def list_users(
    request: Request,
    q: Optional[str] = None,
    user_data: Dict = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Registered users with their summed step activity, filtered by ?q="""
    users = service.list_users_with_steps()
    return templates.TemplateResponse(request, "users.html", page_context(
        request, "👥 Users", f"{len(users)} registered users",
        users=filter_users(users, q),
        summary=summarize(users),
        query=q or "",
        initials=initials,
    ))
