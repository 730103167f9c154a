"""Security Headers — the fixed response header set and the static-asset bypass rule.

Invariants:
    - The header set is an immutable mapping built once per app
    - apply_security_headers() overwrites handler headers with the fixed set,
      except Content-Type which stays under the handler's control
    - Asset paths are matched by extension only (case-insensitive)
"""

from collections.abc import Mapping, MutableMapping
from types import MappingProxyType

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": (
        "camera=(), microphone=(), geolocation=(), payment=(), usb=(), "
        "screen-wake-lock=(), web-share=()"
    ),
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "Cross-Origin-Embedder-Policy": "require-corp",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline' https://www.googletagmanager.com "
        "https://www.google-analytics.com https://static.cloudflareinsights.com "
        "https://www.clarity.ms https://fonts.googleapis.com; "
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
        "font-src 'self' https://fonts.gstatic.com; "
        "img-src 'self' data: https:; "
        "connect-src 'self' https://api.resend.com https://www.google-analytics.com "
        "https://region1.google-analytics.com https://www.clarity.ms; "
        "frame-ancestors 'none'; upgrade-insecure-requests;"
    ),
}

ASSET_EXTENSIONS: frozenset[str] = frozenset({
    ".css", ".js", ".mjs", ".map", ".png", ".jpg", ".jpeg", ".gif", ".svg",
    ".webp", ".avif", ".ico", ".woff", ".woff2", ".ttf", ".otf", ".eot",
    ".mp4", ".webm", ".txt", ".xml", ".webmanifest",
})

_HANDLER_OWNED = "content-type"

SecurityHeaderSet = Mapping[str, str]


def build_security_header_set(
    overrides: Mapping[str, str] | None = None,
) -> SecurityHeaderSet:
    """Freeze the header set. Overrides replace individual values."""
    headers = dict(SECURITY_HEADERS)
    if overrides:
        headers.update(overrides)
    return MappingProxyType(headers)


def apply_security_headers(
    headers: MutableMapping[str, str], header_set: SecurityHeaderSet,
) -> MutableMapping[str, str]:
    """Merge the fixed set over a response's headers in place."""
    for name, value in header_set.items():
        if name.lower() == _HANDLER_OWNED:
            continue
        headers[name] = value
    return headers


def is_static_asset(path: str) -> bool:
    last_segment = path.rsplit("/", 1)[-1].lower()
    if "." not in last_segment:
        return False
    return "." + last_segment.rsplit(".", 1)[-1] in ASSET_EXTENSIONS
