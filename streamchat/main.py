"""StreamChat launcher.

Two layouts are supported, chosen with RUN_MODE:

    integrated  One uvicorn server hosts /api/chat and the NiceGUI page.
    separate    The API and the UI run as two processes on their own ports.

In both modes the chat page is pointed at the API through CHAT_API_URL,
derived from the API port unless set explicitly. Settings in a .env file are
honored.
"""

import logging
import os
import subprocess
import sys
import time
from collections.abc import Callable

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def api_url_for(port: int) -> str:
    """Chat endpoint on the local API server listening on `port`."""
    return f"http://localhost:{port}/api/chat"


def run_integrated(host: str, port: int) -> None:
    """Serve the API and the chat page from one process."""
    import uvicorn
    from nicegui import ui

    from streamchat.api.app import create_app
    from streamchat.ui import chat_page  # noqa: F401  registers "/"

    os.environ.setdefault("CHAT_API_URL", api_url_for(port))

    app = create_app()
    ui.run_with(
        app,
        title="StreamChat",
        favicon="💬",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "streamchat-secret"),
    )

    logger.info(f"Chat UI on http://{host}:{port}/, API docs on http://{host}:{port}/docs")
    uvicorn.run(app, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


def wait_first(
    procs: dict[str, subprocess.Popen],
    interval: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Block until one of `procs` exits and return its exit code."""
    while True:
        for name, proc in procs.items():
            code = proc.poll()
            if code is not None:
                logger.info(f"{name} process exited with code {code}")
                return code
        sleep(interval)


def run_separate(host: str, api_port: int, ui_port: int) -> int:
    """Run the API server and the UI as two child processes.

    Returns:
        Exit code of whichever process stopped first.
    """
    env = {
        **os.environ,
        "CHAT_API_URL": os.getenv("CHAT_API_URL", api_url_for(api_port)),
        "UI_PORT": str(ui_port),
    }

    logger.info(f"API on http://{host}:{api_port}, chat UI on http://{host}:{ui_port}")
    procs = {
        "API": subprocess.Popen(
            [sys.executable, "-m", "uvicorn", "streamchat.api.app:app",
             "--host", host, "--port", str(api_port)],
            env=env,
        ),
        "UI": subprocess.Popen(
            [sys.executable, "-m", "streamchat.ui.chat_page"],
            env=env,
        ),
    }

    try:
        return wait_first(procs)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
        return 0
    finally:
        for proc in procs.values():
            if proc.poll() is None:
                proc.terminate()
                proc.wait()


def main() -> None:
    configure_logging()

    mode = os.getenv("RUN_MODE", "integrated").lower()
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting StreamChat in {mode} mode")

    if mode == "separate":
        sys.exit(run_separate(host, port, int(os.getenv("UI_PORT", "8080"))))
    run_integrated(host, port)


if __name__ == "__main__":
    main()
