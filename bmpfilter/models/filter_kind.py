"""Закрытый набор фильтров и их односимвольные селекторы."""
from __future__ import annotations

from enum import Enum

from bmpfilter.errors import InvalidFilterError


class FilterKind(Enum):
    BLUR = "b"
    EDGES = "e"
    GRAYSCALE = "g"
    REFLECT = "r"
    SEPIA = "s"

    @property
    def selector(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        return _TITLES[self]

    @classmethod
    def from_selector(cls, selector: str) -> FilterKind:
        """Возвращает фильтр по символу флага (`b`, `e`, `g`, `r`, `s`).

        Raises:
            InvalidFilterError: если символ не соответствует ни одному фильтру.
        """
        try:
            return cls(selector)
        except ValueError:
            raise InvalidFilterError(f"Invalid filter: {selector!r}") from None


_TITLES = {
    FilterKind.BLUR: "Размытие",
    FilterKind.EDGES: "Края (Собель)",
    FilterKind.GRAYSCALE: "Оттенки серого",
    FilterKind.REFLECT: "Отражение",
    FilterKind.SEPIA: "Сепия",
}
