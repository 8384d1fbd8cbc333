"""Run the FastAPI app via `python -m contextcoach`."""
from __future__ import annotations

import uvicorn

from .config import configure_logging, get_settings


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("contextcoach.app:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    main()
