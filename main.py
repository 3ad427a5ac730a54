import os

import uvicorn

from compass.logger import setup_logging


def main():
    """Entry point for the Compass web service."""
    setup_logging()

    reload_enabled = os.getenv("COMPASS_RELOAD", "0").lower() in {"1", "true", "yes"}
    host = os.getenv("COMPASS_HOST", "127.0.0.1")
    port = int(os.getenv("COMPASS_PORT", "8010"))

    uvicorn.run(
        "web.backend.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload_enabled,
        reload_dirs=["web", "compass"] if reload_enabled else None,
    )


if __name__ == "__main__":
    main()
