"""
ASGI Entry Point for the ristream API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` first so that settings read at
import time see them.

Usage
-----
Run via the module entry point:
    $ python -m ristream.api.server

Or via uvicorn directly:
    $ uvicorn ristream.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(".env"))

from ristream.api.app import create_app  # noqa: E402
from ristream.core.settings import load_settings  # noqa: E402

app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    cfg = load_settings()
    uvicorn.run(
        "ristream.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=cfg.is_dev,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
