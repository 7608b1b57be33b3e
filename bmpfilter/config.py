"""Настройки из окружения (и необязательного файла `.env`)."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

COMPARE_MODES = ("off", "wipe", "side_by_side")


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    log_format: str = "%(levelname)s: %(message)s"
    preview_compare: str = "wipe"

    @classmethod
    def from_env(cls) -> Settings:
        load_dotenv()
        compare = os.getenv("BMPFILTER_PREVIEW_COMPARE", cls.preview_compare)
        if compare not in COMPARE_MODES:
            compare = cls.preview_compare
        return cls(
            log_level=os.getenv("BMPFILTER_LOG_LEVEL", cls.log_level).upper(),
            log_format=os.getenv("BMPFILTER_LOG_FORMAT", cls.log_format),
            preview_compare=compare,
        )
