"""Entrypoint: python -m site_service"""
from __future__ import annotations

import uvicorn

from site_service.config import settings


def main() -> None:
    uvicorn.run(
        "site_service.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.is_development else "warning",
    )


if __name__ == "__main__":
    main()
