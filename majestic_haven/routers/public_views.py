from datetime import date, timedelta
from fastapi import APIRouter, Request, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session
from ..config import settings
from ..db import get_db
from ..services import room_service
from ..templating import render

router = APIRouter(tags=["public"])

@router.get("/", response_class=HTMLResponse)
def home(request: Request, db: Session = Depends(get_db)):
    today = date.today()
    featured = room_service.get_featured_rooms(db, limit=settings.FEATURED_ROOMS)
    return render(request, "home.html", {
        "featured_rooms": featured,
        "today": today.isoformat(),
        "tomorrow": (today + timedelta(days=1)).isoformat(),
    })

def not_found_page(request: Request):
    return render(request, "not_found.html", status_code=404)
