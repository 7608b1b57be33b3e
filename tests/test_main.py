import logging

import pytest

import bmpfilter.main as cli
from bmpfilter.errors import InvalidFilterError, MultipleFiltersError, UsageError
from bmpfilter.main import main, parse_invocation
from bmpfilter.models.filter_kind import FilterKind
from bmpfilter.services.bitmap_service import BitmapService
from tests.conftest import build_bmp


def test_parse_single_filter():
    invocation = parse_invocation(["-s", "in.bmp", "out.bmp"])
    assert invocation.kind is FilterKind.SEPIA
    assert (str(invocation.infile), str(invocation.outfile)) == ("in.bmp", "out.bmp")


def test_parse_filter_after_files():
    invocation = parse_invocation(["in.bmp", "-e", "out.bmp"])
    assert invocation.kind is FilterKind.EDGES
    assert str(invocation.outfile) == "out.bmp"


@pytest.mark.parametrize(
    "argv, error",
    [
        (["-x", "in.bmp", "out.bmp"], InvalidFilterError),
        (["-gx", "in.bmp", "out.bmp"], MultipleFiltersError),
        (["-g", "-x", "in.bmp", "out.bmp"], MultipleFiltersError),
        (["-x", "-g", "in.bmp", "out.bmp"], InvalidFilterError),
        (["-g", "-b", "in.bmp", "out.bmp"], MultipleFiltersError),
        (["-gb", "in.bmp", "out.bmp"], MultipleFiltersError),
        (["-g", "in.bmp"], UsageError),
        (["-g", "in.bmp", "out.bmp", "extra.bmp"], UsageError),
        (["in.bmp"], UsageError),
    ],
)
def test_parse_errors(argv, error):
    with pytest.raises(error):
        parse_invocation(argv)


def test_parse_without_filter_is_plain_copy():
    invocation = parse_invocation(["in.bmp", "out.bmp"])
    assert invocation.kind is None
    assert str(invocation.infile) == "in.bmp"


def test_parse_verbose_in_flag_cluster():
    invocation = parse_invocation(["-bv", "in.bmp", "out.bmp"])
    assert invocation.kind is FilterKind.BLUR
    assert invocation.verbose


def test_invalid_filter_checked_before_file_count():
    with pytest.raises(InvalidFilterError):
        parse_invocation(["-q"])


def test_main_applies_filter(write_bmp, tmp_path):
    src = write_bmp([[(255, 0, 0), (0, 255, 0)]])
    dst = tmp_path / "out.bmp"

    assert main(["-r", str(src), str(dst)]) == 0

    result = BitmapService().load(dst)
    assert result.grid.to_rows() == [[(0, 255, 0), (255, 0, 0)]]
    assert dst.read_bytes()[:54] == src.read_bytes()[:54]


def test_main_grayscale_file(write_bmp, tmp_path):
    src = write_bmp([[(100, 150, 200)] * 3] * 3)
    dst = tmp_path / "gray.bmp"
    assert main(["-g", str(src), str(dst)]) == 0
    assert BitmapService().load(dst).grid.to_rows() == [[(150, 150, 150)] * 3] * 3


@pytest.mark.parametrize(
    "argv, code",
    [
        (["-z", "a.bmp", "b.bmp"], 1),
        (["-b", "-s", "a.bmp", "b.bmp"], 2),
        (["-gx", "a.bmp", "b.bmp"], 2),
        (["-b", "a.bmp"], 3),
    ],
)
def test_main_argument_exit_codes(argv, code):
    assert main(argv) == code


def test_main_missing_input(tmp_path):
    assert main(["-b", str(tmp_path / "missing.bmp"), str(tmp_path / "out.bmp")]) == 4


def test_main_unwritable_output(write_bmp, tmp_path):
    src = write_bmp([[(1, 2, 3)]])
    assert main(["-b", str(src), str(tmp_path / "missing" / "out.bmp")]) == 5


def test_main_unsupported_format(tmp_path, caplog):
    src = tmp_path / "in.bmp"
    src.write_bytes(build_bmp([[(1, 2, 3)]], bit_count=32))
    with caplog.at_level(logging.ERROR, logger="bmpfilter"):
        assert main(["-e", str(src), str(tmp_path / "out.bmp")]) == 6
    assert "Unsupported file format" in caplog.text
    assert (tmp_path / "out.bmp").read_bytes() == b""


def test_main_without_filter_copies_input(tmp_path):
    src = tmp_path / "in.bmp"
    src.write_bytes(build_bmp([[(10, 20, 30), (40, 50, 60), (70, 80, 90)]]))
    dst = tmp_path / "copy.bmp"
    assert main([str(src), str(dst)]) == 0
    assert dst.read_bytes() == src.read_bytes()


def test_output_checked_before_format(tmp_path):
    src = tmp_path / "in.bmp"
    src.write_bytes(build_bmp([[(1, 2, 3)]], bit_count=32))
    assert main(["-b", str(src), str(tmp_path / "missing" / "out.bmp")]) == 5


def test_input_checked_before_output(tmp_path):
    assert main(["-b", str(tmp_path / "missing.bmp"), str(tmp_path / "missing" / "out.bmp")]) == 4


def test_main_verbose_flag_reaches_logging(write_bmp, tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "configure_logging", lambda settings, verbose=False: calls.append(verbose))
    src = write_bmp([[(1, 2, 3)]])
    assert main(["-gv", str(src), str(tmp_path / "out.bmp")]) == 0
    assert calls == [False, True]
