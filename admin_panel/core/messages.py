from fastapi import Request
from typing import Dict, List

_SESSION_KEY = "_messages"


def flash(request: Request, message: str, category: str = "success") -> None:
    """Queue a one-shot banner for the next rendered page."""
    messages = request.session.get(_SESSION_KEY, [])
    messages.append({"category": category, "text": message})
    request.session[_SESSION_KEY] = messages


def pop_messages(request: Request) -> List[Dict[str, str]]:
    return request.session.pop(_SESSION_KEY, [])
