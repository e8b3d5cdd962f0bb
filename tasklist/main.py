from __future__ import annotations

import uvicorn

from tasklist.api.app import create_app
from tasklist.config import load_settings
from tasklist.infra.logging import setup_logging


def main() -> None:
    settings = load_settings()
    setup_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
