from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from site_service.api.deps import FeedStoreDep

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(store: FeedStoreDep) -> JSONResponse:
    errors: list[str] = []

    if store is not None:
        try:
            await store.ping()
        except Exception as exc:  # noqa: BLE001
            errors.append(f"redis: {exc}")

    if errors:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors},
        )
    return JSONResponse(content={"status": "ready", "feed": store is not None})
