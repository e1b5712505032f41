"""Client for the internal analytics services."""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from defi_guardian.config import GuardianConfig, UpstreamService

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Internal-API-Key"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class UpstreamUnavailable(Exception):
    """An upstream service failed, timed out, or returned a non-success status."""

    def __init__(self, service: UpstreamService, reason: str) -> None:
        super().__init__(f"{service.value}: {reason}")
        self.service = service
        self.reason = reason


class UpstreamClient:
    """
    Client for the internal analytics services.

    Every call maps failures to ``None`` so callers never see transport
    exceptions. ``max_attempts`` is the only retry policy; it defaults to a
    single attempt.
    """

    def __init__(self, config: GuardianConfig) -> None:
        self.config = config
        self.timeout = config.timeout
        self.max_attempts = config.max_attempts

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.config.api_key,
        }

    async def _send(self, service: UpstreamService, payload: dict[str, Any]) -> Any:
        """POST the payload to a service and return the decoded JSON body."""
        url = self.config.service_urls[service]

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(url, json=payload, headers=self._headers())
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                raise UpstreamUnavailable(service, f"returned {e.response.status_code}")
            except httpx.TimeoutException:
                raise UpstreamUnavailable(service, f"timed out after {self.timeout}s")
            except httpx.HTTPError as e:
                raise UpstreamUnavailable(service, f"request failed: {e!r}")
            except ValueError as e:
                raise UpstreamUnavailable(service, f"invalid JSON body: {e}")

    async def call(
        self,
        service: UpstreamService,
        payload: dict[str, Any],
        schema: type[ResponseT],
    ) -> ResponseT | None:
        """
        Call a service and validate its response.

        Args:
            service: Which internal service to call
            payload: JSON-serializable request body
            schema: Pydantic model the response must match

        Returns:
            The validated response, or None if the service was unavailable
            or returned an unexpected shape.
        """
        data: Any = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                data = await self._send(service, payload)
                break
            except UpstreamUnavailable as e:
                logger.warning(
                    "Upstream %s unavailable (attempt %d/%d): %s",
                    service.value,
                    attempt,
                    self.max_attempts,
                    e.reason,
                )
        else:
            return None

        try:
            return schema.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "Upstream %s returned unexpected shape: %d validation error(s)",
                service.value,
                e.error_count(),
            )
            return None
