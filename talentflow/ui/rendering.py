"""Jinja2 template environment shared by the UI routes."""

from pathlib import Path

from fastapi.templating import Jinja2Templates


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
