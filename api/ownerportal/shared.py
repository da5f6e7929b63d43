# ownerportal/shared.py
from pathlib import Path

# FastAPI / Starlette bits the routers use
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
)
from fastapi.templating import Jinja2Templates

# SQLAlchemy session type
from sqlalchemy.orm import Session

# Where templates live
PROJECT_ROOT = Path(__file__).resolve().parents[2]
TEMPLATES_DIR = PROJECT_ROOT / "web" / "templates"

# Single Jinja2Templates instance shared across renderers
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Re-export for convenience
__all__ = [
    "APIRouter",
    "Depends",
    "HTTPException",
    "Query",
    "Session",
    "templates",
]
