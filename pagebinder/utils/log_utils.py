"""Logging setup for pagebinder.

Every module imports ``logger`` from here. Importing configures loguru with a
rich console sink and, unless disabled, a rotating debug file. The console
level and file location come from ``PAGEBINDER_LOG_LEVEL`` and
``PAGEBINDER_LOG_FILE`` (an empty value turns the file sink off). These are
read straight from the environment because settings loading itself logs.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from loguru import logger
from rich.logging import RichHandler


_CONFIGURED: bool = False

DEFAULT_CONSOLE_LEVEL = "INFO"
DEFAULT_FILE_LEVEL = "DEBUG"
DEFAULT_FILE_PATH = "pagebinder_debug.log"
DEFAULT_FILE_ROTATION = "5 MB"
DEFAULT_FILE_RETENTION = 2

LOG_LEVEL_ENV = "PAGEBINDER_LOG_LEVEL"
LOG_FILE_ENV = "PAGEBINDER_LOG_FILE"

_UNSET: Any = object()

_RICH_HANDLER_KWARGS: dict[str, Any] = {
    # File names may contain square brackets.
    "markup": False,
    "show_time": False,
}


def _console_level_from_env() -> str:
    value = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    return value or DEFAULT_CONSOLE_LEVEL


def _file_path_from_env() -> str | None:
    value = os.getenv(LOG_FILE_ENV)
    if value is None:
        return DEFAULT_FILE_PATH
    return value.strip() or None


def configure_logging(
    *,
    console_level: str | None = None,
    file_path: str | os.PathLike[str] | None = _UNSET,
    force: bool = False,
) -> None:
    """Install the console and file sinks.

    Args:
        console_level: Minimum level shown on the console. Defaults to
            ``PAGEBINDER_LOG_LEVEL`` or ``INFO``.
        file_path: Debug log location; ``None`` disables the file sink.
            Defaults to ``PAGEBINDER_LOG_FILE`` or ``pagebinder_debug.log``.
        force: Reconfigure even if logging was already set up.
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    level = (console_level or _console_level_from_env()).upper()
    target = _file_path_from_env() if file_path is _UNSET else file_path

    logger.remove()

    logger.add(
        RichHandler(**_RICH_HANDLER_KWARGS),  # type: ignore[arg-type]
        level=level,
        format="{message}",
    )

    if target:
        resolved_file_path = Path(target).expanduser().resolve()
        resolved_file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(resolved_file_path),
            level=DEFAULT_FILE_LEVEL,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
            rotation=DEFAULT_FILE_ROTATION,
            retention=DEFAULT_FILE_RETENTION,
            enqueue=True,
        )

    _CONFIGURED = True


__all__ = ["logger", "configure_logging"]

configure_logging()
