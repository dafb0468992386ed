# src/studyflow/llm/errors.py

from __future__ import annotations

import httpx
import openai


class ProviderError(RuntimeError):
    """Upstream provider answered, but not with something usable."""


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in (401, 403)
    return False


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == 429
    return False


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError is a subclass of APIConnectionError.
    return isinstance(exc, (openai.APIConnectionError, httpx.TransportError))


def friendly_provider_error(provider: str, err: Exception) -> str:
    """Map an upstream failure to a short message that is safe to show to the student."""
    if _is_auth_error(err):
        return f"{provider} authentication failed. Check your API key."
    if _is_rate_limit_error(err):
        return f"{provider} is rate-limited. Try again later."
    if _is_connection_error(err):
        return f"{provider} network/timeout error. Try again later."
    if isinstance(err, httpx.HTTPStatusError):
        return f"{provider} API error: {err.response.status_code}"
    if isinstance(err, openai.APIStatusError):
        return f"{provider} API error: {err.status_code}"
    msg = str(err).strip()
    return msg or f"{provider} request failed."


UPSTREAM_ERRORS: tuple[type[Exception], ...] = (ProviderError, httpx.HTTPError, openai.OpenAIError)
