from datetime import date, datetime
from pathlib import Path
from fastapi.templating import Jinja2Templates
from .config import settings
from .services.currency import format_money
from .services.notifications import pop_flashes

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

def money_filter(amount) -> str:
    """A Jinja2 filter rendering an amount in the hotel's currency."""
    return format_money(amount, settings.CURRENCY)

def long_date_filter(value: date | datetime | str | None) -> str:
    """Render dates as ``Jun 01, 2024``."""
    if not value:
        return ""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return value.strftime("%b %d, %Y")

# Create a single, shared Jinja2Templates instance
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
# Add the custom filters to the environment
templates.env.filters["money"] = money_filter
templates.env.filters["long_date"] = long_date_filter
templates.env.globals["app_name"] = settings.APP_NAME


def render(request, name: str, context: dict | None = None, status_code: int = 200):
    """TemplateResponse with the shared page context (pending flash messages, currency)."""
    ctx = {"flashes": pop_flashes(request), "currency": settings.CURRENCY}
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
