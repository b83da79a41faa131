"""StreamChat server entry point.

Serves the relay API and the NiceGUI chat page from one uvicorn process.
Settings come from the environment (and .env): HOST, PORT, LOG_LEVEL.
"""

import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_app():
    """Create the relay app with the chat page mounted at ``/``."""
    from nicegui import ui

    from streamchat.api.app import create_app
    from streamchat.ui.chat_page import chat_page  # noqa: F401 - registers the page

    app = create_app()
    ui.run_with(
        app,
        title="StreamChat",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "streamchat-secret"),
    )
    return app


def main() -> None:
    import uvicorn

    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting StreamChat on http://{host}:{port} (chat page at /)")

    uvicorn.run(build_app(), host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    main()
