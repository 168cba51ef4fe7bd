"""Entry point for standalone backend process."""

import uvicorn

from kcd2_conflict_checker.config import settings
from kcd2_conflict_checker.main import app


def main() -> None:
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
