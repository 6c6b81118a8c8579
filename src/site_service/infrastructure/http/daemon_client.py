"""Outbound calls to the LBRY daemon used by the interactive tour."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from site_service.application.exceptions import UploadError, UpstreamError

logger = logging.getLogger(__name__)


class DaemonClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        rpc_url: str,
        images_url: str,
        access_token: str | None,
    ) -> None:
        self._http = http
        self._rpc_url = rpc_url
        self._images_url = images_url
        self._access_token = access_token

    @property
    def access_token(self) -> str | None:
        return self._access_token

    async def call(self, params: dict[str, Any]) -> dict[str, Any]:
        """Issue one RPC call; the daemon takes its arguments as a query string."""
        try:
            response = await self._http.get(self._rpc_url, params=_query(params))
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{type(exc).__name__}: {exc}") from exc
        return _json_object(response)

    async def upload_image(self, file_path: str) -> str:
        """Upload an image by path and return the filename the daemon stored."""
        try:
            response = await self._http.put(
                self._images_url,
                content=file_path,
                headers={"Content-Type": "text/plain"},
                params=_query({"access_token": self._access_token}),
            )
            body = _json_object(response)
        except httpx.HTTPError as exc:
            raise UploadError(f"{type(exc).__name__}: {exc}") from exc
        except UpstreamError as exc:
            raise UploadError(exc.detail, status_code=exc.status_code) from exc

        if body.get("status") != "ok" or not body.get("filename"):
            raise UploadError(f"Unexpected upload response: {body}", status_code=response.status_code)
        logger.debug("Uploaded %s as %s", file_path, body["filename"])
        return str(body["filename"])


def _query(params: dict[str, Any]) -> dict[str, str]:
    query: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        query[key] = str(value)
    return query


def _json_object(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise UpstreamError(
            f"Unparseable response ({response.status_code})",
            status_code=response.status_code,
        ) from exc
    if not isinstance(body, dict):
        raise UpstreamError(
            f"Expected a JSON object, got {type(body).__name__}",
            status_code=response.status_code,
        )
    return body
