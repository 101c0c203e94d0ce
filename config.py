import logging
import os
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

TODOS_FILE   = Path(os.getenv("TODOS_FILE", "todos.json")).expanduser().resolve()
STATIC_DIR   = Path(os.getenv("STATIC_DIR", Path(__file__).parent / "static"))
HOST         = os.getenv("HOST", "127.0.0.1")
PORT         = int(os.getenv("PORT", "3000"))
LOG_LEVEL    = os.getenv("LOG_LEVEL", "INFO").upper()
OPEN_BROWSER = os.getenv("OPEN_BROWSER", "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
