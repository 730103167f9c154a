"""Catalog Handler — static project list and configured short redirects."""

import copy

from gateway.core.errors import NotFoundError
from gateway.core.projects import PROJECTS
from gateway.services.container import GatewayServices


def list_projects() -> list[dict]:
    # Callers get their own copy; the catalog itself stays untouched.
    return copy.deepcopy(list(PROJECTS))


def resolve_redirect(services: GatewayServices, slug: str) -> str:
    target = services.settings.redirects.get(slug.lower())
    if not target:
        raise NotFoundError("Redirect not found", "REDIRECT_NOT_FOUND")
    return target
