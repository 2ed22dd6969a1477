# auth_service/app/services/consent_renderer.py
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
CONSENT_TEMPLATE = "authorize_client.html"


def build_consent_context(
    *,
    logo: Optional[str],
    name: str,
    website: Optional[str],
    state: str,
    scopes: List[str],
) -> Dict[str, Any]:
    """Campos expostos à página de consentimento. O código nunca entra aqui."""
    return {
        "logo": logo,
        "name": name,
        "website": website,
        "state": state,
        "scopes": list(scopes),
    }


class ConsentRenderer:

    def __init__(self, directory: Path = TEMPLATES_DIR, template_name: str = CONSENT_TEMPLATE):
        self.templates = Jinja2Templates(directory=str(directory))
        self.template_name = template_name

    def render(
        self,
        request: Request,
        *,
        logo: Optional[str],
        name: str,
        website: Optional[str],
        state: str,
        scopes: List[str],
    ) -> Response:
        context = build_consent_context(
            logo=logo, name=name, website=website, state=state, scopes=scopes
        )
        return self.templates.TemplateResponse(request, self.template_name, context)
