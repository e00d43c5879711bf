"""
Layout shell: sidebar navigation, active entry and the mobile menu state.
"""

from fastapi import Request
from starlette.datastructures import URL
from typing import Any, Dict, List, Optional, Tuple

from admin_panel.core.messages import pop_messages

NAV_ITEMS = [
    {"href": "/", "label": "Dashboard", "icon": "🏠", "desc": "Overview"},
    {"href": "/users", "label": "Users", "icon": "👥", "desc": "Manage"},
    {"href": "/tips", "label": "Health Tips", "icon": "💡", "desc": "AI Tips"},
    {"href": "/ads", "label": "Ads", "icon": "📢", "desc": "Manage"},
    {"href": "/notifications", "label": "Notifications", "icon": "🔔", "desc": "Send"},
    {"href": "/profile", "label": "Admin Profile", "icon": "👤", "desc": "API Keys"},
]

MENU_PARAM = "menu"


def is_active(href: str, path: str) -> bool:
    if href == "/":
        return path == "/"
    return path == href or path.startswith(href + "/")


def navigation(path: str) -> List[Dict[str, Any]]:
    return [{**item, "active": is_active(item["href"], path)} for item in NAV_ITEMS]


def relative_url(url: URL) -> str:
    return f"{url.path}?{url.query}" if url.query else url.path


def menu_links(url: URL) -> Tuple[str, str]:
    """(open, closed) links for the current page; every other query param is kept."""
    closed = url.remove_query_params(MENU_PARAM)
    opened = closed.include_query_params(**{MENU_PARAM: "open"})
    return relative_url(opened), relative_url(closed)


def page_context(request: Request, title: str, subtitle: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """Template context shared by every screen rendered inside the layout shell."""
    path = request.url.path
    sidebar_open = request.query_params.get(MENU_PARAM) == "open"
    open_url, closed_url = menu_links(request.url)
    context = {
        "request": request,
        "title": title,
        "subtitle": subtitle,
        "nav_items": navigation(path),
        "sidebar_open": sidebar_open,
        "menu_toggle_url": closed_url if sidebar_open else open_url,
        "menu_close_url": closed_url,
        "messages": pop_messages(request),
        "current_admin": request.session.get("email"),
    }
    context.update(extra)
    return context
