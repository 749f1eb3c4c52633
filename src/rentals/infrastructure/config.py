"""Runtime settings, read from the environment once at start-up."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

from rentals.domain.exceptions import ValidationError
from rentals.domain.ports import LateFeeConfig, SettingsProvider

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    late_fee_rate: Decimal
    late_fee_grace_hours: int
    scheduler_interval_minutes: float
    expiry_lookahead_minutes: float
    sweep_budget_seconds: float
    lock_timeout_seconds: float
    log_level: str

    @staticmethod
    def from_env(environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return Settings(
            data_dir=Path(env.get("RENTALS_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            late_fee_rate=_decimal(env, "RENTALS_LATE_FEE_RATE", "0.1"),
            late_fee_grace_hours=_whole_number(env, "RENTALS_LATE_FEE_GRACE_HOURS", "0"),
            scheduler_interval_minutes=_number(env, "RENTALS_SCHEDULER_INTERVAL_MINUTES", "5"),
            expiry_lookahead_minutes=_number(env, "RENTALS_EXPIRY_LOOKAHEAD_MINUTES", "10"),
            sweep_budget_seconds=_number(env, "RENTALS_SWEEP_BUDGET_SECONDS", "30"),
            lock_timeout_seconds=_number(env, "RENTALS_LOCK_TIMEOUT_SECONDS", "5"),
            log_level=env.get("RENTALS_LOG_LEVEL", "INFO").upper(),
        )


class EnvSettingsProvider(SettingsProvider):

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def get_late_fee_config(self) -> LateFeeConfig:
        return LateFeeConfig(
            rate=self._settings.late_fee_rate,
            grace_period_hours=self._settings.late_fee_grace_hours,
        )


def _decimal(env, name: str, default: str) -> Decimal:
    raw = env.get(name, default)
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ValidationError(f"{name} cannot be negative, got {raw!r}")
    return value


def _number(env, name: str, default: str) -> float:
    raw = env.get(name, default)
    try:
        value = float(str(raw).strip())
    except ValueError as exc:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ValidationError(f"{name} cannot be negative, got {raw!r}")
    return value


def _whole_number(env, name: str, default: str) -> int:
    value = _number(env, name, default)
    if not value.is_integer():
        raise ValidationError(f"{name} must be a whole number, got {env.get(name)!r}")
    return int(value)
