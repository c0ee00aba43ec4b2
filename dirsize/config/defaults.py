from __future__ import annotations

from dirsize.config.schema import AppConfig


def default_config() -> AppConfig:
    return AppConfig()
