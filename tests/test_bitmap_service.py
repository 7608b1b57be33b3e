import io

import pytest
from PIL import Image

from bmpfilter.errors import (
    CreateOutputError,
    OpenInputError,
    TruncatedBitmapError,
    UnsupportedFormatError,
)
from bmpfilter.models.filter_kind import FilterKind
from bmpfilter.services.bitmap_service import BitmapService
from bmpfilter.services.filter_service import FilterService
from tests.conftest import build_bmp


@pytest.fixture
def service() -> BitmapService:
    return BitmapService()


def test_decode_reads_headers_and_rows(service, sample_rows):
    bitmap = service.decode(build_bmp(sample_rows))
    assert bitmap.file_header.type == 0x4D42
    assert bitmap.file_header.off_bits == 54
    assert bitmap.info_header.width == 3
    assert bitmap.info_header.height == 2
    assert bitmap.info_header.row_padding == 3
    assert bitmap.is_bottom_up
    assert bitmap.grid.to_rows() == sample_rows


def test_decode_top_down(service, sample_rows):
    bitmap = service.decode(build_bmp(sample_rows, top_down=True))
    assert not bitmap.is_bottom_up
    assert bitmap.height == 2
    assert bitmap.grid.to_rows() == sample_rows


def test_encode_reproduces_file_byte_for_byte(service, sample_rows):
    raw = build_bmp(sample_rows, x_ppm=3780, y_ppm=-1)
    assert service.encode(service.decode(raw)) == raw


def test_encode_writes_zero_padding(service, sample_rows):
    raw = bytearray(build_bmp(sample_rows))
    raw[54 + 9:54 + 12] = b"\xff\xff\xff"  # padding of the first row
    encoded = service.encode(service.decode(bytes(raw)))
    assert encoded[54 + 9:54 + 12] == b"\x00\x00\x00"
    assert len(encoded) == len(raw)


def test_filtered_bitmap_keeps_headers(service, sample_rows):
    raw = build_bmp(sample_rows)
    bitmap = service.decode(raw)
    FilterService().apply(FilterKind.EDGES, bitmap.grid)
    encoded = service.encode(bitmap)
    assert encoded[:54] == raw[:54]
    assert len(encoded) == len(raw)


def test_decode_ignores_trailing_bytes(service, sample_rows):
    bitmap = service.decode(build_bmp(sample_rows) + b"trailer")
    assert bitmap.grid.to_rows() == sample_rows


@pytest.mark.parametrize(
    "overrides",
    [
        {"signature": b"BA"},
        {"off_bits": 138},
        {"info_size": 108},
        {"bit_count": 32},
        {"compression": 1},
    ],
)
def test_unsupported_variants(service, sample_rows, overrides):
    with pytest.raises(UnsupportedFormatError):
        service.decode(build_bmp(sample_rows, **overrides))


@pytest.mark.parametrize("length", [0, 20, 60])
def test_truncated_input(service, sample_rows, length):
    with pytest.raises(TruncatedBitmapError):
        service.decode(build_bmp(sample_rows)[:length])


def test_zero_height_bitmap(service):
    raw = build_bmp([])
    bitmap = service.decode(raw)
    assert bitmap.grid.is_empty
    assert service.encode(bitmap) == raw


def test_load_and_save(service, write_bmp, sample_rows, tmp_path):
    src = write_bmp(sample_rows)
    bitmap = service.load(src)
    assert bitmap.path == src
    dst = tmp_path / "out.bmp"
    service.save(bitmap, dst)
    assert dst.read_bytes() == src.read_bytes()


def test_load_missing_file(service, tmp_path):
    with pytest.raises(OpenInputError):
        service.load(tmp_path / "missing.bmp")


def test_save_into_missing_directory(service, write_bmp, sample_rows, tmp_path):
    bitmap = service.load(write_bmp(sample_rows))
    with pytest.raises(CreateOutputError):
        service.save(bitmap, tmp_path / "no" / "such" / "dir.bmp")


def test_create_truncates_before_decoding(service, tmp_path):
    dst = tmp_path / "out.bmp"
    dst.write_bytes(b"old contents")
    with service.create(dst) as stream:
        with pytest.raises(UnsupportedFormatError):
            service.decode(build_bmp([[(1, 2, 3)]], bit_count=32))
    assert stream.closed
    assert dst.read_bytes() == b""


def test_create_in_missing_directory(service, tmp_path):
    with pytest.raises(CreateOutputError):
        service.create(tmp_path / "no" / "dir.bmp")


def test_pillow_reads_encoded_output(service, sample_rows):
    encoded = service.encode(service.decode(build_bmp(sample_rows)))
    with Image.open(io.BytesIO(encoded)) as img:
        img = img.convert("RGB")
        # bottom-up: first stored row is the last displayed row
        assert img.getpixel((0, 1)) == sample_rows[0][0]
        assert img.getpixel((2, 0)) == sample_rows[1][2]


def test_decodes_pillow_written_bmp(service):
    img = Image.new("RGB", (5, 3), (0, 0, 0))
    img.putpixel((0, 0), (250, 10, 20))
    img.putpixel((4, 2), (1, 2, 3))
    buf = io.BytesIO()
    img.save(buf, format="BMP")

    bitmap = service.decode(buf.getvalue())
    assert (bitmap.width, bitmap.height) == (5, 3)
    assert bitmap.info_header.row_padding == 1
    assert service.to_pil_image(bitmap).tobytes() == img.tobytes()
