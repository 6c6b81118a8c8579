"""GitHub REST client for organization activity."""
from __future__ import annotations

from typing import Any

import httpx

from site_service.application.exceptions import UpstreamError


class GitHubClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        api_url: str = "https://api.github.com",
        token: str | None = None,
    ) -> None:
        self._http = http
        self._api_url = api_url.rstrip("/")
        self._headers = {"Accept": "application/vnd.github+json"}
        if token:
            self._headers["Authorization"] = f"token {token}"

    async def org_events(self, org: str, *, per_page: int = 20, page: int = 1) -> list[dict[str, Any]]:
        """Newest-first public events of `org`."""
        try:
            response = await self._http.get(
                f"{self._api_url}/orgs/{org}/events",
                params={"per_page": per_page, "page": page},
                headers=self._headers,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"GitHub responded {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(f"{type(exc).__name__}: {exc}") from exc

        if not isinstance(data, list):
            raise UpstreamError(f"Expected a list of events, got {type(data).__name__}")
        return data
