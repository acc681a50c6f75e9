"""Cited Chat entry point.

Serves the download API and the NiceGUI chat page. In the default integrated
mode both share one uvicorn server, so attachment URLs are same-origin and the
chat page reaches the download API on its own port.

Environment variables are loaded from a .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Settings are read at import time by the config modules
load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Libraries that log every request at INFO/DEBUG
_NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "httpx", "httpcore")

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Set up stdout logging once for the whole process."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def check_storage_settings() -> None:
    """Warn at startup when the S3 settings are incomplete.

    The server still starts; download requests then fail with a 500 that
    names the missing settings.
    """
    from src.storage.config import get_storage_config

    missing = get_storage_config().missing_settings()
    if missing:
        logger.warning(
            f"Storage configuration incomplete, downloads will fail: {', '.join(missing)}",
            extra={"event": "download.config_missing"},
        )


def run_integrated(host: str, port: int) -> None:
    """Serve the API and the chat page from one FastAPI app."""
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    # The chat page calls the download API on this same server
    os.environ.setdefault("API_BASE_URL", f"http://localhost:{port}")

    app = create_app()
    ui.run_with(
        app,
        title="Cited Chat",
        favicon="💬",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "cited-chat-secret"),
    )

    logger.info(f"Chat UI on http://localhost:{port}/, API docs on http://localhost:{port}/docs")
    uvicorn.run(app, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate(host: str, port: int) -> None:
    """Run the API and the chat page as two processes.

    The API listens on ``port`` and the chat page on ``UI_PORT`` (8080).
    Attachments are then served by the chat page's own server.
    """
    import subprocess

    ui_port = os.getenv("UI_PORT", "8080")
    child_env = {**os.environ, "API_BASE_URL": os.getenv("API_BASE_URL", f"http://localhost:{port}")}

    api_proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "src.api.app:app", "--host", host, "--port", str(port)],
        env=child_env,
    )
    ui_proc = subprocess.Popen(
        [sys.executable, "-c", f"from src.ui.chat_page import main; main(port={ui_port})"],
        env=child_env,
    )
    logger.info(f"API on http://localhost:{port}, chat UI on http://localhost:{ui_port}")

    try:
        # Stop both as soon as either exits
        while api_proc.poll() is None and ui_proc.poll() is None:
            try:
                api_proc.wait(timeout=1)
            except subprocess.TimeoutExpired:
                pass
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in (api_proc, ui_proc):
            proc.terminate()
            proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the API and the chat page on different ports.
    """
    configure_logging()
    check_storage_settings()

    mode = os.getenv("RUN_MODE", "integrated").lower()
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting Cited Chat in {mode} mode")

    if mode == "separate":
        run_separate(host, port)
    else:
        run_integrated(host, port)


if __name__ == "__main__":
    main()
