"""Request Context — who is calling, and the per-request state the pipeline attached.

Invariants:
    - By default client identity is the socket peer, else "unknown"
    - Only with trust_proxy_headers does it prefer the edge header (CF-Connecting-IP),
      then the first X-Forwarded-For hop; both are caller-controlled otherwise
    - request.state.meta and request.state.tracker are set by the pipeline
      middleware before any endpoint or dependency runs
"""

from fastapi import Request

from gateway.core.domain_types import ClientId
from gateway.core.request_state import RequestMeta, StageTracker
from gateway.services.container import GatewayServices

UNKNOWN = "unknown"
# Column widths of contact_submissions.client_ip and analytics_events.country
MAX_CLIENT_ID_LENGTH = 64
MAX_COUNTRY_LENGTH = 8


def client_identifier(request: Request, trust_proxy_headers: bool = False) -> ClientId:
    if trust_proxy_headers:
        edge_ip = request.headers.get("cf-connecting-ip", "").strip()
        if edge_ip and len(edge_ip) <= MAX_CLIENT_ID_LENGTH:
            return ClientId(edge_ip)
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop and len(first_hop) <= MAX_CLIENT_ID_LENGTH:
            return ClientId(first_hop)
    if request.client and request.client.host:
        return ClientId(request.client.host)
    return ClientId(UNKNOWN)


def client_country(request: Request) -> str:
    country = request.headers.get("cf-ipcountry", "").strip().upper()
    if country and len(country) <= MAX_COUNTRY_LENGTH and country.isalnum():
        return country
    return UNKNOWN


def get_services(request: Request) -> GatewayServices:
    return request.app.state.services


def get_meta(request: Request) -> RequestMeta:
    return request.state.meta


def get_tracker(request: Request) -> StageTracker:
    return request.state.tracker
