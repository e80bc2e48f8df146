"""Application configuration, loaded from config.json at project root."""

import json
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from .models import Currency, RateSet

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    home_currency: str = "MYR"
    primary_currency: str = "USD"
    secondary_currency: str = "HKD"
    storage: str = "json"  # "json" or "sqlite"
    data_file: str = "data/financial-data.json"
    rate_cache_ttl: int = 3600
    price_cache_ttl: int = 300
    price_request_delay: float = 0.2
    fallback_primary_to_home: Decimal = Decimal("4.7")
    fallback_secondary_to_home: Decimal = Decimal("0.6")
    fallback_primary_to_secondary: Decimal = Decimal("7.8")
    log_level: str = "WARNING"

    def code_for(self, currency: Currency) -> str:
        """ISO code behind a currency role."""
        return {
            Currency.HOME: self.home_currency,
            Currency.PRIMARY: self.primary_currency,
            Currency.SECONDARY: self.secondary_currency,
        }[currency]

    def role_for(self, code: str) -> Optional[Currency]:
        """Currency role for an ISO code, or None if unsupported."""
        code = code.upper()
        for role in Currency:
            if self.code_for(role).upper() == code:
                return role
        return None

    def fallback_rates(self) -> RateSet:
        return RateSet(
            primary_to_home=self.fallback_primary_to_home,
            secondary_to_home=self.fallback_secondary_to_home,
            primary_to_secondary=self.fallback_primary_to_secondary,
        )

    def data_path(self) -> Path:
        path = Path(self.data_file)
        if path.is_absolute():
            return path
        return find_project_root() / path


_DEFAULTS = AppConfig()
_DECIMAL_FIELDS = ("fallback_primary_to_home", "fallback_secondary_to_home", "fallback_primary_to_secondary")
_cached: Optional[AppConfig] = None


def find_project_root() -> Path:
    """Walk up from this file to find the project root (where pyproject.toml lives)."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    return Path.cwd()


def _config_path() -> Path:
    return find_project_root() / "config.json"


def _from_dict(data: dict) -> AppConfig:
    cfg = AppConfig()
    for key, default in asdict(_DEFAULTS).items():
        if key not in data:
            continue
        raw = data[key]
        if key in _DECIMAL_FIELDS:
            value = Decimal(str(raw))
            if value <= 0:
                raise ValueError(f"{key} must be positive")
        else:
            value = type(default)(raw)
        setattr(cfg, key, value)
    if cfg.storage not in ("json", "sqlite"):
        raise ValueError(f"Unknown storage backend: {cfg.storage}")
    return cfg


def get_config() -> AppConfig:
    global _cached
    if _cached is not None:
        return _cached
    path = _config_path()
    if not path.exists():
        _cached = AppConfig()
        return _cached
    try:
        _cached = _from_dict(json.loads(path.read_text(encoding="utf-8")))
    except (ValueError, TypeError, InvalidOperation) as e:
        logger.warning("Ignoring invalid %s: %s", path, e)
        _cached = AppConfig()
    return _cached


def set_config(cfg: Optional[AppConfig]) -> None:
    """Replace the cached config without touching disk (None forces a reload)."""
    global _cached
    _cached = cfg


def save_config(cfg: AppConfig) -> None:
    global _cached
    _cached = cfg
    data = asdict(cfg)
    for key in _DECIMAL_FIELDS:
        data[key] = str(data[key])
    _config_path().write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
