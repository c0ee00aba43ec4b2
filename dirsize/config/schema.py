from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dirsize.models.enums import Rounding, UnitBase
from dirsize.scan import SCANNER_NAMES

# (json_key, attr_name, minimum), shared by from_dict and CLI override clamping.
_INT_FIELDS: tuple[tuple[str, str, int], ...] = (("scanWorkers", "scan_workers", 1),)


def clamp_field(value: int, field_name: str) -> int:
    """Clamp *value* to the minimum defined for *field_name* in _INT_FIELDS."""
    for _, attr, minimum in _INT_FIELDS:
        if attr == field_name:
            return max(minimum, value)
    return value


def _get_int(data: dict[str, Any], json_key: str, default: int, minimum: int) -> int:
    return max(minimum, int(data.get(json_key, default)))


@dataclass(slots=True)
class AppConfig:
    scanner: str = "auto"
    scan_workers: int = 4
    unit_base: UnitBase = UnitBase.BINARY
    rounding: Rounding = Rounding.HALF_EVEN
    show_total: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "scanner": self.scanner,
            "scanWorkers": self.scan_workers,
            "unitBase": self.unit_base.value,
            "rounding": self.rounding.value,
            "showTotal": self.show_total,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], defaults: AppConfig) -> AppConfig:
        int_kwargs: dict[str, int] = {}
        for json_key, attr, minimum in _INT_FIELDS:
            int_kwargs[attr] = _get_int(data, json_key, getattr(defaults, attr), minimum)

        scanner = str(data.get("scanner", defaults.scanner))
        if scanner not in SCANNER_NAMES:
            msg = f"Unknown scanner: {scanner}. Use: {', '.join(SCANNER_NAMES)}."
            raise ValueError(msg)

        return cls(
            scanner=scanner,
            unit_base=UnitBase(str(data.get("unitBase", defaults.unit_base.value))),
            rounding=Rounding(str(data.get("rounding", defaults.rounding.value))),
            show_total=bool(data.get("showTotal", defaults.show_total)),
            **int_kwargs,
        )
