from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from pagebinder.assets import ImageAsset, ImageKind
from pagebinder.errors import (
    EmptyDocumentError,
    ImageDecodeError,
    ImageReadError,
    SelectionError,
    ServiceUnavailableError,
)
from pagebinder.layout import LayoutOptions
from pagebinder.pdf import ConversionPipeline, PipelineConfig
from pagebinder.pdf.services import DecodedImage
from pagebinder.utils.concurrency import TqdmProgressReporter


def _payload(data_url: str) -> str:
    return data_url.split(",", 1)[1]


class _StubReader:
    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.calls: list[str] = []
        self._fail_on = fail_on or set()

    async def read_as_data_url(self, asset: ImageAsset) -> str:
        self.calls.append(asset.name)
        if asset.name in self._fail_on:
            raise OSError("disk on fire")
        return f"data:{asset.mime_type};base64,{asset.name}"


class _StubDecoder:
    def __init__(self, sizes: dict[str, tuple[int, int]], fail_on: set[str] | None = None) -> None:
        self._sizes = sizes
        self._fail_on = fail_on or set()
        self.calls: list[str] = []

    async def decode(self, data_url: str) -> DecodedImage:
        name = _payload(data_url)
        self.calls.append(data_url)
        if name in self._fail_on:
            raise ValueError("malformed")
        width, height = self._sizes[name]
        return DecodedImage(width=width, height=height, image=name)


class _StubSurface:
    def __init__(self, width: int, height: int) -> None:
        self.size = (width, height)
        self._drawn: str | None = None

    def draw(self, decoded: DecodedImage) -> None:
        self._drawn = decoded.image

    def to_png_data_url(self) -> str:
        return f"data:image/png;base64,{self._drawn}"


class _StubSurfaces:
    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.requests: list[tuple[int, int]] = []

    def create_surface(self, width: int, height: int) -> _StubSurface | None:
        self.requests.append((width, height))
        return _StubSurface(width, height) if self.available else None


@dataclass
class _Placement:
    data_url: str
    kind: ImageKind
    rect: tuple[float, float, float, float]


@dataclass
class _StubDocument:
    page_size: tuple[float, float]
    orientation: str
    pages: list[list[_Placement]] = field(default_factory=lambda: [[]])
    add_page_calls: int = 0
    closed: bool = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def add_page(self) -> None:
        self.add_page_calls += 1
        self.pages.append([])

    def current_page_size(self) -> tuple[float, float]:
        return self.page_size

    def add_image(
        self, data_url: str, kind: ImageKind, x: float, y: float, width: float, height: float
    ) -> None:
        self.pages[-1].append(_Placement(data_url, kind, (x, y, width, height)))

    def to_bytes(self) -> bytes:
        return f"%PDF-stub pages={self.page_count}".encode()

    def close(self) -> None:
        self.closed = True


class _StubDocuments:
    def __init__(self, page_size: tuple[float, float] = (210.0, 297.0)) -> None:
        self.page_size = page_size
        self.created: list[_StubDocument] = []

    def create(self, *, page_size: str, orientation: str) -> _StubDocument:
        document = _StubDocument(page_size=self.page_size, orientation=orientation)
        self.created.append(document)
        return document


def _asset(name: str) -> ImageAsset:
    kind: ImageKind = {
        ".png": "png",
        ".jpg": "jpeg",
        ".webp": "webp",
    }.get(Path(name).suffix, "unsupported")  # type: ignore[assignment]
    return ImageAsset(source=Path(name), kind=kind)


def _pipeline(
    sizes: dict[str, tuple[int, int]],
    *,
    documents: _StubDocuments | None = None,
    surfaces: _StubSurfaces | None = None,
    reader: _StubReader | None = None,
    decode_fail_on: set[str] | None = None,
    config: PipelineConfig | None = None,
) -> tuple[ConversionPipeline, _StubDocuments]:
    documents = documents or _StubDocuments()
    pipeline = ConversionPipeline(
        reader=reader or _StubReader(),
        decoder=_StubDecoder(sizes, fail_on=decode_fail_on),
        surfaces=surfaces or _StubSurfaces(),
        documents=documents,
        config=config,
    )
    return pipeline, documents


@pytest.mark.asyncio
async def test_single_png_fit_on_a4() -> None:
    pipeline, documents = _pipeline({"photo.png": (800, 600)})

    report = await pipeline.convert_with_report([_asset("photo.png")], LayoutOptions())

    assert report.pdf_bytes == b"%PDF-stub pages=1"
    document = documents.created[0]
    assert document.add_page_calls == 0
    assert document.page_count == 1
    x, y, width, height = document.pages[0][0].rect
    assert (x, y, width, height) == pytest.approx((10.0, 77.25, 190.0, 142.5))
    assert report.pages[0].geometry.y == pytest.approx(77.25)
    assert document.closed


@pytest.mark.asyncio
async def test_pages_follow_input_order() -> None:
    names = [f"img{i}.png" for i in range(5)]
    pipeline, documents = _pipeline({name: (100 + i, 100) for i, name in enumerate(names)})

    report = await pipeline.convert_with_report([_asset(n) for n in names], LayoutOptions())

    document = documents.created[0]
    assert len(documents.created) == 1
    assert document.page_count == 5
    assert document.add_page_calls == 4
    assert [page[0].data_url.split(",")[1] for page in document.pages] == names
    assert [page.source_name for page in report.pages] == names


@pytest.mark.asyncio
async def test_mixed_formats_embed_webp_as_png() -> None:
    sizes = {"a.png": (10, 10), "b.jpg": (20, 10), "c.webp": (10, 20)}
    surfaces = _StubSurfaces()
    pipeline, documents = _pipeline(sizes, surfaces=surfaces)

    report = await pipeline.convert_with_report(
        [_asset("a.png"), _asset("b.jpg"), _asset("c.webp")], LayoutOptions()
    )

    document = documents.created[0]
    assert [page[0].kind for page in document.pages] == ["png", "jpeg", "png"]
    assert document.pages[2][0].data_url == "data:image/png;base64,c.webp"
    assert surfaces.requests == [(10, 20)]
    assert [page.kind for page in report.pages] == ["png", "jpeg", "png"]


@pytest.mark.asyncio
async def test_surface_failure_skips_only_that_image() -> None:
    sizes = {"a.png": (10, 10), "b.webp": (10, 10), "c.jpg": (10, 10)}
    pipeline, documents = _pipeline(sizes, surfaces=_StubSurfaces(available=False))

    report = await pipeline.convert_with_report(
        [_asset("a.png"), _asset("b.webp"), _asset("c.jpg")], LayoutOptions()
    )

    assert documents.created[0].page_count == 2
    assert report.skipped == ["b.webp"]
    assert [page.source_name for page in report.pages] == ["a.png", "c.jpg"]


@pytest.mark.asyncio
async def test_sole_webp_surface_failure_raises_by_default() -> None:
    pipeline, documents = _pipeline({"only.webp": (10, 10)}, surfaces=_StubSurfaces(available=False))

    with pytest.raises(EmptyDocumentError):
        await pipeline.convert([_asset("only.webp")], LayoutOptions())
    assert documents.created == []


@pytest.mark.asyncio
async def test_sole_webp_surface_failure_can_yield_blank_document() -> None:
    pipeline, documents = _pipeline(
        {"only.webp": (10, 10)},
        surfaces=_StubSurfaces(available=False),
        config=PipelineConfig(allow_empty_document=True),
    )

    report = await pipeline.convert_with_report([_asset("only.webp")], LayoutOptions())

    assert report.page_count == 0
    assert report.skipped == ["only.webp"]
    assert documents.created[0].pages == [[]]


@pytest.mark.asyncio
async def test_read_failure_aborts_whole_run() -> None:
    reader = _StubReader(fail_on={"b.png"})
    pipeline, documents = _pipeline(
        {"a.png": (10, 10), "b.png": (10, 10), "c.png": (10, 10)}, reader=reader
    )

    with pytest.raises(ImageReadError) as excinfo:
        await pipeline.convert([_asset("a.png"), _asset("b.png"), _asset("c.png")], LayoutOptions())

    assert excinfo.value.name == "b.png"
    assert reader.calls == ["a.png", "b.png"]
    assert documents.created[0].closed


@pytest.mark.asyncio
async def test_decode_failure_aborts_whole_run() -> None:
    pipeline, _ = _pipeline({"a.jpg": (10, 10)}, decode_fail_on={"a.jpg"})

    with pytest.raises(ImageDecodeError):
        await pipeline.convert([_asset("a.jpg")], LayoutOptions())


@pytest.mark.asyncio
async def test_webp_decode_failure_aborts_rather_than_skips() -> None:
    pipeline, _ = _pipeline({"a.webp": (10, 10)}, decode_fail_on={"a.webp"})

    with pytest.raises(ImageDecodeError):
        await pipeline.convert([_asset("a.webp")], LayoutOptions())


@pytest.mark.asyncio
async def test_empty_selection_is_rejected() -> None:
    pipeline, _ = _pipeline({})
    with pytest.raises(SelectionError):
        await pipeline.convert([], LayoutOptions())


@pytest.mark.asyncio
async def test_missing_document_backend_is_rejected() -> None:
    pipeline = ConversionPipeline(
        reader=_StubReader(),
        decoder=_StubDecoder({}),
        surfaces=_StubSurfaces(),
        documents=None,
    )

    assert pipeline.is_ready is False
    with pytest.raises(ServiceUnavailableError):
        await pipeline.convert([_asset("a.png")], LayoutOptions())


@pytest.mark.asyncio
async def test_unfiltered_gif_is_a_caller_error() -> None:
    pipeline, _ = _pipeline({"a.png": (1, 1)})
    with pytest.raises(ValueError):
        await pipeline.convert([_asset("a.png"), _asset("b.gif")], LayoutOptions())


@pytest.mark.asyncio
async def test_layout_uses_reported_page_size() -> None:
    documents = _StubDocuments(page_size=(209.9, 297.04))
    pipeline, _ = _pipeline({"a.png": (100, 100)}, documents=documents)

    report = await pipeline.convert_with_report(
        [_asset("a.png")], LayoutOptions(image_fit="fill")
    )

    geometry = report.pages[0].geometry
    assert geometry.width == pytest.approx(189.9)
    assert geometry.height == pytest.approx(277.04)
    assert report.pages[0].page_width == pytest.approx(209.9)


@pytest.mark.asyncio
async def test_orientation_is_passed_to_document() -> None:
    pipeline, documents = _pipeline({"a.png": (1, 1)})

    await pipeline.convert([_asset("a.png")], LayoutOptions(orientation="landscape"))

    assert documents.created[0].orientation == "landscape"


@pytest.mark.asyncio
async def test_repeated_runs_produce_identical_geometry() -> None:
    sizes = {"a.png": (640, 480), "b.jpg": (480, 640), "c.webp": (1000, 10)}
    options = LayoutOptions(page_size="letter", image_fit="original")
    pipeline, _ = _pipeline(sizes)

    first = await pipeline.convert_with_report([_asset(n) for n in sizes], options)
    second = await pipeline.convert_with_report([_asset(n) for n in sizes], options)

    assert first.page_count == second.page_count == 3
    assert [p.geometry for p in first.pages] == [p.geometry for p in second.pages]
    assert [(p.page_width, p.page_height) for p in first.pages] == [
        (p.page_width, p.page_height) for p in second.pages
    ]


@pytest.mark.asyncio
async def test_decoded_dimensions_are_recorded() -> None:
    pipeline, _ = _pipeline({"a.png": (31, 17)})
    asset = _asset("a.png")

    await pipeline.convert([asset], LayoutOptions())

    assert (asset.width, asset.height) == (31, 17)


class _RecordingProgress:
    def __init__(self) -> None:
        self.events: list[object] = []

    def start(self, total: int) -> None:
        self.events.append(("start", total))

    def increment(self) -> None:
        self.events.append("tick")

    def close(self) -> None:
        self.events.append("close")


@pytest.mark.asyncio
async def test_progress_reporter_sees_every_image() -> None:
    progress = _RecordingProgress()
    pipeline, _ = _pipeline({"a.png": (1, 1), "b.png": (1, 1)})

    await pipeline.convert(
        [_asset("a.png"), _asset("b.png")], LayoutOptions(), progress_reporter=progress
    )

    assert progress.events == [("start", 2), "tick", "tick", "close"]


@pytest.mark.asyncio
async def test_tqdm_reporter_survives_a_full_run() -> None:
    reporter = TqdmProgressReporter("convert", disable=True)
    pipeline, _ = _pipeline({"a.png": (1, 1), "b.png": (1, 1)})

    report = await pipeline.convert_with_report(
        [_asset("a.png"), _asset("b.png")], LayoutOptions(), progress_reporter=reporter
    )

    assert report.page_count == 2
    # The pipeline already closed it; closing again is harmless.
    reporter.close()
