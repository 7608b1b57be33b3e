"""Точка входа командной строки: `bmpfilter [flag] infile outfile`."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

from bmpfilter.config import Settings
from bmpfilter.errors import (
    BitmapFilterError,
    InvalidFilterError,
    MultipleFiltersError,
    UsageError,
)
from bmpfilter.models.filter_kind import FilterKind
from bmpfilter.services.bitmap_service import BitmapService
from bmpfilter.services.filter_service import FilterService

logger = logging.getLogger("bmpfilter")

USAGE = "Usage: bmpfilter [flag] infile outfile"

_FLAG_HELP = {
    FilterKind.BLUR: "box blur 3x3",
    FilterKind.EDGES: "Sobel edge detection",
    FilterKind.GRAYSCALE: "grayscale",
    FilterKind.REFLECT: "horizontal reflection",
    FilterKind.SEPIA: "sepia",
}


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        # "-bx": a filter followed by an unknown letter counts as a second selector
        if "ignored explicit argument" in message:
            raise MultipleFiltersError(f"Only one filter allowed. ({message})")
        raise UsageError(f"{USAGE} ({message})")


@dataclass(frozen=True)
class Invocation:
    kind: Optional[FilterKind]  # None: copy the bitmap unchanged
    infile: Path
    outfile: Path
    verbose: bool = False


def build_parser() -> argparse.ArgumentParser:
    # infile/outfile stay unparsed: they come back in order among the leftovers
    parser = _ArgumentParser(
        prog="bmpfilter",
        usage="%(prog)s [flag] infile outfile",
        description="Apply one filter to a 24-bit uncompressed BMP.",
    )
    for kind in FilterKind:
        parser.add_argument(
            f"-{kind.selector}",
            dest="filters",
            action="append_const",
            const=kind,
            help=_FLAG_HELP[kind],
        )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _first_filter_position(argv: Sequence[str], unknown: Sequence[str]) -> Optional[int]:
    selectors = {kind.selector for kind in FilterKind}
    for i, arg in enumerate(argv):
        if arg.startswith("-") and not arg.startswith("--") and arg not in unknown and selectors & set(arg[1:]):
            return i
    return None


def parse_invocation(argv: Sequence[str]) -> Invocation:
    """Разбирает аргументы в порядке проверок: фильтр, единственность, файлы."""
    args, rest = build_parser().parse_known_args(list(argv))

    filters: List[FilterKind] = args.filters or []
    unknown = [a for a in rest if a.startswith("-") and a not in ("-", "--")]
    if unknown:
        # an unknown flag after a filter is read as a second selector
        first = _first_filter_position(argv, unknown)
        if first is not None and first < list(argv).index(unknown[0]):
            raise MultipleFiltersError(f"Only one filter allowed. ({unknown[0]})")
        raise InvalidFilterError(f"Invalid filter: {unknown[0]}")

    if len(filters) > 1:
        raise MultipleFiltersError("Only one filter allowed.")

    files = [a for a in rest if a != "--"]
    if len(files) != 2:
        raise UsageError(USAGE)

    kind = filters[0] if filters else None
    return Invocation(kind=kind, infile=Path(files[0]), outfile=Path(files[1]), verbose=args.verbose)


def run(invocation: Invocation) -> None:
    """Вход открывается, затем создаётся выход, и только потом проверяется формат."""
    bitmap_service = BitmapService()
    filter_service = FilterService()

    raw = bitmap_service.read(invocation.infile)
    with bitmap_service.create(invocation.outfile) as stream:
        bitmap = bitmap_service.decode(raw)
        if invocation.kind is not None:
            filter_service.apply(invocation.kind, bitmap.grid)
        bitmap_service.write(bitmap_service.encode(bitmap), stream)

    name = invocation.kind.name.lower() if invocation.kind is not None else "copy"
    logger.info("%s: %s -> %s", name, invocation.infile, invocation.outfile)


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format=settings.log_format, stream=sys.stderr)
    logging.getLogger().setLevel(level)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Разбирает аргументы, применяет фильтр и возвращает код завершения."""
    settings = Settings.from_env()
    argv = sys.argv[1:] if argv is None else argv
    configure_logging(settings)

    try:
        invocation = parse_invocation(argv)
        if invocation.verbose:
            configure_logging(settings, verbose=True)
        run(invocation)
    except BitmapFilterError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
