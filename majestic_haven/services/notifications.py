"""One-shot notifications (flash messages) kept in the signed session cookie."""
from fastapi import Request

_SESSION_KEY = "_flashes"

CATEGORIES = ("success", "error", "info")


def flash(request: Request, message: str, category: str = "info") -> None:
    if category not in CATEGORIES:
        category = "info"
    messages = request.session.get(_SESSION_KEY, [])
    messages.append({"message": message, "category": category})
    request.session[_SESSION_KEY] = messages


def pop_flashes(request: Request) -> list[dict]:
    """Return pending messages and clear them; each is shown once."""
    return request.session.pop(_SESSION_KEY, [])
