"""Rate-limit dependency for the public intake endpoint."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import Request, Response

from langschool.core.config import get_settings
from langschool.core.rate_limit import get_rate_limiter
from langschool.shared.exceptions import RateLimitException

logger = logging.getLogger(__name__)


def _trusted_proxy_ips(raw_value: object) -> set[str]:
    if raw_value is None:
        return set()
    if isinstance(raw_value, str):
        values: Iterable[object] = raw_value.split(",")
    elif isinstance(raw_value, tuple | list | set | frozenset):
        values = raw_value
    else:
        return set()

    return {str(value).strip() for value in values if str(value).strip()}


def _resolve_client_ip(request: Request, *, trusted_proxy_ips: set[str]) -> str:
    """Use X-Forwarded-For only when the direct peer is a trusted proxy."""
    client_ip = "unknown"
    if request.client and request.client.host:
        client_ip = request.client.host

    forwarded_for = request.headers.get("x-forwarded-for")
    if not forwarded_for or client_ip not in trusted_proxy_ips:
        return client_ip

    forwarded_client = forwarded_for.split(",")[0].strip()
    return forwarded_client or client_ip


async def enforce_intake_rate_limit(request: Request, response: Response) -> None:
    """Spend one request of the caller's intake budget, keyed by resolved client IP."""
    settings = get_settings()
    resolved_ip = _resolve_client_ip(
        request,
        trusted_proxy_ips=_trusted_proxy_ips(settings.intake_rate_limit_trusted_proxy_ips),
    )
    limit = settings.intake_rate_limit_requests
    decision = await get_rate_limiter().hit(
        f"enrollments:intake:{resolved_ip}",
        limit=limit,
        window_seconds=settings.intake_rate_limit_window_seconds,
    )
    if not decision.allowed:
        logger.warning(
            "Intake rate limit hit for %s, retry in %ss",
            resolved_ip,
            decision.retry_after,
        )
        raise RateLimitException(
            f"Too many enrollment requests. Try again in {decision.retry_after} second(s).",
            retry_after=decision.retry_after,
        )
    response.headers["X-RateLimit-Limit"] = str(limit)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
