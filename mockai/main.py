import logging

import uvicorn

from mockai.core.app_factory import create_app
from mockai.core.config import get_settings

settings = get_settings()
app = create_app(settings)

logger = logging.getLogger(__name__)


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""

    logger.info(
        "server.starting",
        extra={"host": settings.server.server_host, "port": settings.server.server_port},
    )
    uvicorn.run(
        app,
        host=settings.server.server_host,
        port=settings.server.server_port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    run()
