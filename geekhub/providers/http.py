from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from geekhub.core.config import settings
from geekhub.utils.redaction import redact_secrets

logger = logging.getLogger("geekhub.providers.http")


class ExternalAPIError(Exception):
    pass


class ProviderCredentialsMissing(ExternalAPIError):
    """Raised before any request when a provider has no credentials configured."""


class UpstreamRequestFailed(ExternalAPIError):
    """A provider call failed; ``status_code`` is None for transport errors."""

    def __init__(self, provider: str, status_code: int | None, detail: str | None = None) -> None:
        message = f"{provider} request failed"
        if status_code is not None:
            message = f"{message} with status {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


def is_caller_error(exc: BaseException) -> bool:
    """True for 4xx responses: the provider is healthy, the request was not."""
    return isinstance(exc, UpstreamRequestFailed) and exc.status_code is not None and exc.status_code < 500


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, UpstreamRequestFailed):
        return exc.status_code is not None and exc.status_code >= 500
    return isinstance(exc, httpx.TransportError)


async def fetch_json(
    url: str,
    *,
    provider: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(settings.provider_retry_attempts, 1)),
            wait=wait_exponential_jitter(initial=1, max=8),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        ):
            with attempt:
                async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
                    response = await client.get(url, headers=headers, params=params)
                if response.status_code >= 400:
                    raise UpstreamRequestFailed(provider, response.status_code)
                try:
                    payload = response.json()
                except ValueError as exc:
                    raise UpstreamRequestFailed(provider, response.status_code, "invalid JSON body") from exc
                return payload if isinstance(payload, dict) else {}
    except httpx.HTTPError as exc:
        detail = redact_secrets(str(exc))
        logger.warning("%s transport error for %s: %s", provider, redact_secrets(url), detail)
        raise UpstreamRequestFailed(provider, None, detail) from exc
    raise ExternalAPIError("Unreachable")
