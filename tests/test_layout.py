from __future__ import annotations

import pytest

from pagebinder.layout import MARGIN_MM, PIXEL_TO_MM, LayoutOptions, PageGeometry, compute_layout


A4 = (210.0, 297.0)

IMAGE_SIZES = [(800, 600), (600, 800), (1, 1), (5000, 20), (20, 5000), (3000, 3000), (123, 457)]
PAGE_SIZES = [A4, (297.0, 210.0), (215.9, 279.4), (148.0, 210.0), (297.0, 420.0)]


def test_fit_scenario_800x600_on_a4() -> None:
    geometry = compute_layout(800, 600, *A4, "fit")

    assert geometry.width == pytest.approx(190.0)
    assert geometry.height == pytest.approx(142.5)
    assert geometry.x == pytest.approx(10.0)
    assert geometry.y == pytest.approx(77.25)


@pytest.mark.parametrize("image_size", IMAGE_SIZES)
@pytest.mark.parametrize("page_size", PAGE_SIZES)
def test_fit_preserves_aspect_and_centers(
    image_size: tuple[int, int], page_size: tuple[float, float]
) -> None:
    image_width, image_height = image_size
    page_width, page_height = page_size

    geometry = compute_layout(image_width, image_height, page_width, page_height, "fit")

    assert geometry.width / geometry.height == pytest.approx(image_width / image_height)
    assert geometry.x == pytest.approx((page_width - geometry.width) / 2)
    assert geometry.y == pytest.approx((page_height - geometry.height) / 2)
    assert geometry.width <= page_width - 2 * MARGIN_MM + 1e-9
    assert geometry.height <= page_height - 2 * MARGIN_MM + 1e-9
    # One side always touches the margin.
    assert geometry.x == pytest.approx(MARGIN_MM) or geometry.y == pytest.approx(MARGIN_MM)


@pytest.mark.parametrize("image_size", IMAGE_SIZES)
@pytest.mark.parametrize("page_size", PAGE_SIZES)
def test_fill_covers_available_area(
    image_size: tuple[int, int], page_size: tuple[float, float]
) -> None:
    page_width, page_height = page_size

    geometry = compute_layout(*image_size, page_width, page_height, "fill")

    assert geometry == PageGeometry(
        x=MARGIN_MM,
        y=MARGIN_MM,
        width=page_width - 2 * MARGIN_MM,
        height=page_height - 2 * MARGIN_MM,
    )


@pytest.mark.parametrize("image_size", IMAGE_SIZES)
@pytest.mark.parametrize("page_size", PAGE_SIZES)
def test_original_clamps_each_axis(
    image_size: tuple[int, int], page_size: tuple[float, float]
) -> None:
    image_width, image_height = image_size
    page_width, page_height = page_size
    available_width = page_width - 2 * MARGIN_MM
    available_height = page_height - 2 * MARGIN_MM

    geometry = compute_layout(image_width, image_height, page_width, page_height, "original")

    assert geometry.width == pytest.approx(min(image_width * PIXEL_TO_MM, available_width))
    assert geometry.height == pytest.approx(min(image_height * PIXEL_TO_MM, available_height))
    assert geometry.x + geometry.width <= page_width
    assert geometry.y + geometry.height <= page_height
    assert geometry.x == pytest.approx((page_width - geometry.width) / 2)


def test_original_small_image_keeps_native_size() -> None:
    geometry = compute_layout(100, 50, *A4, "original")

    assert geometry.width == pytest.approx(35.2778)
    assert geometry.height == pytest.approx(17.6389)


def test_original_clamps_axes_independently() -> None:
    # Width is clamped, height is not: the aspect ratio changes.
    geometry = compute_layout(2000, 100, *A4, "original")

    assert geometry.width == pytest.approx(190.0)
    assert geometry.height == pytest.approx(35.2778)


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5)])
def test_rejects_non_positive_pixels(width: int, height: int) -> None:
    with pytest.raises(ValueError):
        compute_layout(width, height, *A4, "fit")


def test_rejects_unknown_fit_mode() -> None:
    with pytest.raises(ValueError):
        compute_layout(10, 10, *A4, "stretch")  # type: ignore[arg-type]


def test_geometry_as_rect() -> None:
    assert PageGeometry(x=1, y=2, width=3, height=4).as_rect() == (1, 2, 4, 6)


def test_layout_options_defaults_and_replace() -> None:
    options = LayoutOptions()
    assert (options.page_size, options.orientation, options.image_fit) == ("a4", "portrait", "fit")

    updated = options.replace(orientation="landscape")
    assert updated.orientation == "landscape"
    assert updated.page_size == "a4"
    assert options.orientation == "portrait"


@pytest.mark.parametrize(
    "field,value",
    [("page_size", "b5"), ("orientation", "diagonal"), ("image_fit", "stretch")],
)
def test_layout_options_reject_unknown_values(field: str, value: str) -> None:
    with pytest.raises(ValueError):
        LayoutOptions(**{field: value})
