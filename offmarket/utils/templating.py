"""Shared Jinja2 environment for the server-rendered pages."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from offmarket.config import settings
from offmarket.utils.formatting import relative_time, thousands

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.filters["relative_time"] = relative_time
templates.env.filters["thousands"] = thousands
templates.env.globals["app_name"] = settings.APP_NAME
