from __future__ import annotations

import uvicorn

from .config import settings


def run() -> None:
    uvicorn.run(
        "faculty_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    run()
