import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "recycle_tracker"

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve a named logger under the recycle_tracker namespace.

    Parameters:
    - name: module name (e.g. recycle_tracker.core.ledger) or a short
      suffix (e.g. cli), which is prefixed with the root namespace
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """
    Attach handlers to the root recycle_tracker logger.

    Parameters:
    - level: logging level name or number
    - log_dir: when set, also write one log file per run into this directory

    Calling it again only updates the level; handlers are attached once.
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)

    if _configured:
        return root

    formatter = logging.Formatter(_FORMAT)

    # ------------------------------
    # Console handler
    # ------------------------------
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    # ------------------------------
    # File handler (one per run)
    # ------------------------------
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        logfile = directory / f"recycle-tracker-{timestamp}.log"

        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = False
    _configured = True

    return root
