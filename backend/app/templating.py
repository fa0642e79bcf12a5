from pathlib import Path

from fastapi.templating import Jinja2Templates

from app.models.listing import CATEGORIES
from app.utils.flash import get_flashed_messages

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["get_flashed_messages"] = get_flashed_messages
templates.env.globals["categories"] = CATEGORIES
