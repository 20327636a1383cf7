from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Sequence
from functools import wraps
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

import typer  # type: ignore[import]

from pagebinder.layout import FIT_MODES, ORIENTATIONS, PAGE_SIZES
from pagebinder.utils.log_utils import configure_logging, logger

from . import convert


app = typer.Typer(
    help="Bind PNG, JPEG and WebP images into one PDF on this machine.",
)


@app.callback()
def _global_options(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug output on the console.",
    ),
) -> None:
    if verbose:
        configure_logging(console_level="DEBUG", force=True)


_P = ParamSpec("_P")
_T = TypeVar("_T")


def _synchronous(handler: Callable[_P, Coroutine[Any, Any, _T]]) -> Callable[_P, _T]:
    @wraps(handler)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _T:
        try:
            return asyncio.run(handler(*args, **kwargs))
        except KeyboardInterrupt as err:
            logger.info("Interrupted by user")
            raise typer.Exit(code=130) from err

    return wrapper


def _check_choice(value: str | None, choices: Sequence[str], param_hint: str) -> str | None:
    if value is None:
        return None
    token = value.strip().lower()
    if token not in choices:
        raise typer.BadParameter(
            f"Expected one of: {', '.join(choices)}.",
            param_hint=param_hint,
        )
    return token


@app.command("convert")
@_synchronous
async def convert_command(
    inputs: list[Path] = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Images to bind, in page order. Unsupported formats are skipped.",
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Destination PDF file.",
        file_okay=True,
        dir_okay=False,
        writable=True,
    ),
    page_size: str | None = typer.Option(
        None,
        "--page-size",
        help=f"Page size ({', '.join(PAGE_SIZES)}). Defaults to PAGEBINDER_PAGE_SIZE or a4.",
    ),
    orientation: str | None = typer.Option(
        None,
        "--orientation",
        help=f"Page orientation ({', '.join(ORIENTATIONS)}).",
    ),
    image_fit: str | None = typer.Option(
        None,
        "--fit",
        help=f"How images are placed ({', '.join(FIT_MODES)}).",
    ),
    allow_empty: bool | None = typer.Option(
        None,
        "--allow-empty/--no-allow-empty",
        help="Write a blank PDF instead of failing when every image is skipped.",
        show_default=False,
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        help="Replace the output file if it exists.",
    ),
) -> int:
    options = convert.ConvertOptions(
        inputs=inputs,
        output=output,
        page_size=_check_choice(page_size, PAGE_SIZES, "--page-size"),
        orientation=_check_choice(orientation, ORIENTATIONS, "--orientation"),
        image_fit=_check_choice(image_fit, FIT_MODES, "--fit"),
        allow_empty=allow_empty,
        overwrite=overwrite,
    )
    result = await convert.run(options)
    if result != 0:
        raise typer.Exit(code=result)
    return result


@app.command("list")
def list_command(
    inputs: list[Path] = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Files to inspect.",
    ),
) -> None:
    assets = convert.describe_inputs(inputs)
    supported = sum(1 for asset in assets if asset.is_supported)
    logger.info(f"{supported} of {len(assets)} file(s) can be converted.")


def main(argv: Sequence[str] | None = None) -> int:
    try:
        result = app(args=list(argv) if argv is not None else None, standalone_mode=False)
        return result if isinstance(result, int) else 0
    except SystemExit as exc:
        return int(exc.code or 0)


if __name__ == "__main__":  # pragma: no cover
    app()
