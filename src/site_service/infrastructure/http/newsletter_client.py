"""Mailing-list subscription API client."""
from __future__ import annotations

import httpx

from site_service.application.exceptions import UpstreamError


class NewsletterClient:
    def __init__(self, http: httpx.AsyncClient, *, url: str) -> None:
        self._http = http
        self._url = url

    async def subscribe(self, email: str) -> str:
        """POST the subscription and return the raw response body.

        Raises UpstreamError with `status_code` set for non-2xx responses,
        and without it for transport failures.
        """
        try:
            response = await self._http.post(self._url, params={"email": email})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                exc.response.text or f"HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{type(exc).__name__}: {exc}") from exc
        return response.text
