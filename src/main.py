"""Application entry point.

Serves the chat API and the NiceGUI chat page. Environment variables are
loaded from a .env file before anything reads them.
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))


def run_integrated() -> None:
    """Serve the API and the chat page from one uvicorn server."""
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title="Travel Assistant",
        favicon="✈️",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "travel-chat-secret"),
    )

    logger.info(f"Chat UI and API available at http://localhost:{PORT}/")
    uvicorn.run(app, host=HOST, port=PORT, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate() -> None:
    """Run the API (PORT) and the NiceGUI page (8080) as two processes.

    The UI reaches the API through API_BASE_URL.
    """
    api_proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "src.api.app:app", "--host", HOST, "--port", str(PORT)]
    )
    ui_proc = subprocess.Popen(
        [sys.executable, "-c", "from src.ui.chat_page import main; main()"]
    )
    logger.info(f"API on http://localhost:{PORT}, chat UI on http://localhost:8080")

    try:
        while api_proc.poll() is None and ui_proc.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in (api_proc, ui_proc):
            proc.terminate()
            proc.wait()


def main() -> None:
    """Start in RUN_MODE ``integrated`` (default) or ``separate``."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting Travel Chat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ in {"__main__", "__mp_main__"}:
    main()
