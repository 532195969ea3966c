"""Deployment settings.

Business constants default to the values the dairy has always used and
can be overridden per deployment through ``FROMAGERIE_*`` environment
variables.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from pathlib import Path

from fromagerie.domain.exceptions import ConfigurationError, ValidationError
from fromagerie.domain.model.value_objects import DEFAULT_KG_PER_UNIT, Money, QuantityType
from fromagerie.domain.service.financials import TRANSPORT_FEE_PER_LINE
from fromagerie.domain.service.quantities import MULTIPLE_TOLERANCE

_PREFIX = "FROMAGERIE_"

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DEFAULT_ORDER_REMOVAL_WINDOW = timedelta(minutes=15)


@dataclass(frozen=True)
class Settings:

    data_dir: Path = DEFAULT_DATA_DIR
    transport_fee_per_line: Money = TRANSPORT_FEE_PER_LINE
    multiple_tolerance: float = MULTIPLE_TOLERANCE
    kg_per_unit: Mapping[QuantityType, float] = field(
        default_factory=lambda: dict(DEFAULT_KG_PER_UNIT)
    )
    # None means only admins may remove an order
    order_removal_window: timedelta | None = DEFAULT_ORDER_REMOVAL_WINDOW
    admin_emails: frozenset[str] = frozenset()
    log_level: int = logging.WARNING

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = env.get(_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()

        kg_per_unit = dict(DEFAULT_KG_PER_UNIT)
        for qt, name in ((QuantityType.PER_100G, "KG_PER_100G"), (QuantityType.PER_500G, "KG_PER_500G")):
            raw = get(name)
            if raw is not None:
                kg_per_unit[qt] = _positive_float(name, raw)

        settings = Settings(kg_per_unit=kg_per_unit)

        if (raw := get("DATA_DIR")) is not None:
            settings = replace(settings, data_dir=Path(raw).expanduser())
        if (raw := get("TRANSPORT_FEE")) is not None:
            settings = replace(settings, transport_fee_per_line=_money("TRANSPORT_FEE", raw))
        if (raw := get("MULTIPLE_TOLERANCE")) is not None:
            settings = replace(settings, multiple_tolerance=_positive_float("MULTIPLE_TOLERANCE", raw))
        if (raw := get("ORDER_REMOVAL_MINUTES")) is not None:
            minutes = _non_negative_int("ORDER_REMOVAL_MINUTES", raw)
            settings = replace(
                settings,
                order_removal_window=timedelta(minutes=minutes) if minutes else None,
            )
        if (raw := get("ADMIN_EMAILS")) is not None:
            emails = frozenset(e.strip().lower() for e in raw.split(",") if e.strip())
            settings = replace(settings, admin_emails=emails)
        if (raw := get("LOG_LEVEL")) is not None:
            level = logging.getLevelName(raw.upper())
            if not isinstance(level, int):
                raise ConfigurationError(f"{_PREFIX}LOG_LEVEL: unknown level {raw!r}")
            settings = replace(settings, log_level=level)

        return settings


def _positive_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{_PREFIX}{name}: not a number: {raw!r}") from exc
    if not value > 0 or value == float("inf"):
        raise ConfigurationError(f"{_PREFIX}{name}: must be a positive number")
    return value


def _non_negative_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{_PREFIX}{name}: not an integer: {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{_PREFIX}{name}: must not be negative")
    return value


def _money(name: str, raw: str) -> Money:
    try:
        return Money(Decimal(raw))
    except InvalidOperation as exc:
        raise ConfigurationError(f"{_PREFIX}{name}: invalid amount {raw!r}") from exc
    except ValidationError as exc:
        raise ConfigurationError(f"{_PREFIX}{name}: {exc}") from exc
