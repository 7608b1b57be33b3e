"""Shared fixtures: hand-built 24-bit BMP files."""
from __future__ import annotations

import struct
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

import pytest

RGB = Tuple[int, int, int]


def build_bmp(
    rows: Sequence[Sequence[RGB]],
    *,
    top_down: bool = False,
    bit_count: int = 24,
    compression: int = 0,
    off_bits: int = 54,
    signature: bytes = b"BM",
    info_size: int = 40,
    x_ppm: int = 2835,
    y_ppm: int = 2835,
) -> bytes:
    """Serialises rows (in stored order) field by field, independent of the package."""
    height = len(rows)
    width = len(rows[0]) if rows else 0
    padding = (4 - (width * 3) % 4) % 4
    pixel_bytes = bytearray()
    for row in rows:
        for r, g, b in row:
            pixel_bytes += bytes((b, g, r))
        pixel_bytes += b"\x00" * padding

    file_size = 54 + len(pixel_bytes)
    file_header = signature + struct.pack("<IHHI", file_size, 0, 0, off_bits)
    info_header = struct.pack(
        "<IiiHHIIiiII",
        info_size,
        width,
        -height if top_down else height,
        1,
        bit_count,
        compression,
        len(pixel_bytes),
        x_ppm,
        y_ppm,
        0,
        0,
    )
    return file_header + info_header + bytes(pixel_bytes)


@pytest.fixture
def sample_rows() -> List[List[RGB]]:
    """3x2 image: width 3 means 3 bytes of padding per row."""
    return [
        [(255, 0, 0), (0, 255, 0), (0, 0, 255)],
        [(10, 20, 30), (40, 50, 60), (70, 80, 90)],
    ]


@pytest.fixture
def write_bmp(tmp_path: Path) -> Callable[..., Path]:
    def _write(rows: Sequence[Sequence[RGB]], name: str = "in.bmp", **kwargs) -> Path:
        path = tmp_path / name
        path.write_bytes(build_bmp(rows, **kwargs))
        return path

    return _write
