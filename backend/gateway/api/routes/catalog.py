"""Catalog Routes — GET /api/projects and GET /redirect/{slug}."""

from fastapi import Request, status
from fastapi.responses import RedirectResponse

from gateway.api.request_context import get_services
from gateway.services.handle_catalog import list_projects, resolve_redirect


async def get_projects():
    return list_projects()


async def get_redirect(slug: str, request: Request):
    target = resolve_redirect(get_services(request), slug)
    return RedirectResponse(target, status_code=status.HTTP_302_FOUND)
