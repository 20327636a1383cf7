"""Centralised environment configuration for pagebinder.

This module ensures `.env` loading happens in one place and exposes a
typed snapshot of the default layout options and runtime limits.
Downstream modules call `get_settings()` instead of touching `os.environ`
directly, making it easier to validate values and override behaviour in
tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

from pagebinder.layout import FIT_MODES, ORIENTATIONS, PAGE_SIZES, LayoutOptions
from pagebinder.utils.log_utils import logger


_DEFAULT_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

# Browsers refuse canvases above roughly this many pixels; keep the same ceiling.
DEFAULT_MAX_SURFACE_PIXELS = 268_435_456


def _coerce_int(value: str | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _coerce_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _choice(name: str, value: str | None, choices: tuple[str, ...], default: str) -> str:
    if value is None or value == "":
        return default
    token = value.strip().lower()
    if token not in choices:
        logger.warning(f"Ignoring {name}={value!r}; expected one of {', '.join(choices)}.")
        return default
    return token


@dataclass(frozen=True)
class RuntimeSettings:
    max_surface_pixels: int
    artifact_dir: Path | None
    allow_empty_document: bool


@dataclass(frozen=True)
class PageBinderSettings:
    """Top-level snapshot of configuration values."""

    env_file: Path
    layout: LayoutOptions
    runtime: RuntimeSettings


def _resolve_env_path(env_file: os.PathLike[str] | str | None) -> Path:
    if env_file is None:
        return _DEFAULT_ENV_PATH
    return Path(env_file).resolve()


@lru_cache(maxsize=4)
def _load_settings(env_path: Path) -> PageBinderSettings:
    # Existing environment variables take precedence over `.env` defaults.
    load_dotenv(dotenv_path=env_path, override=False)

    defaults = LayoutOptions()
    layout = LayoutOptions(
        page_size=_choice(  # type: ignore[arg-type]
            "PAGEBINDER_PAGE_SIZE",
            os.getenv("PAGEBINDER_PAGE_SIZE"),
            PAGE_SIZES,
            defaults.page_size,
        ),
        orientation=_choice(  # type: ignore[arg-type]
            "PAGEBINDER_ORIENTATION",
            os.getenv("PAGEBINDER_ORIENTATION"),
            ORIENTATIONS,
            defaults.orientation,
        ),
        image_fit=_choice(  # type: ignore[arg-type]
            "PAGEBINDER_IMAGE_FIT",
            os.getenv("PAGEBINDER_IMAGE_FIT"),
            FIT_MODES,
            defaults.image_fit,
        ),
    )

    max_pixels = _coerce_int(os.getenv("PAGEBINDER_MAX_SURFACE_PIXELS"))
    artifact_dir = os.getenv("PAGEBINDER_ARTIFACT_DIR")
    runtime = RuntimeSettings(
        max_surface_pixels=max_pixels if max_pixels and max_pixels > 0 else DEFAULT_MAX_SURFACE_PIXELS,
        artifact_dir=Path(artifact_dir).expanduser() if artifact_dir else None,
        allow_empty_document=_coerce_bool(os.getenv("PAGEBINDER_ALLOW_EMPTY_DOCUMENT")),
    )

    return PageBinderSettings(env_file=env_path, layout=layout, runtime=runtime)


def get_settings(
    env_file: os.PathLike[str] | str | None = None,
    *,
    reload: bool = False,
) -> PageBinderSettings:
    """Return the cached settings snapshot.

    Args:
        env_file: Optional explicit path to a `.env` file. When omitted the repo
            root `.env` file is used.
        reload: When True the cached snapshot is cleared before loading.
    """
    env_path = _resolve_env_path(env_file)
    if reload:
        _load_settings.cache_clear()
    return _load_settings(env_path)
