"""Configuration helpers for the closet insights app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

from logic.neglect import DEFAULT_THRESHOLD_DAYS, resolve_neglect_threshold

DEFAULT_GAP_CACHE_TTL_SECONDS = 24 * 60 * 60
CACHE_BACKENDS = ("memory", "json")


@dataclass
class AnalyticsConfig:
    """Configuration values for the analytics services.

    Values come from environment variables, optionally merged with an
    environment YAML file, so that local runs and deployments share one
    loading path.
    """

    neglect_threshold_days: int = DEFAULT_THRESHOLD_DAYS
    gap_cache_ttl_seconds: int = DEFAULT_GAP_CACHE_TTL_SECONDS
    preferences_path: str = "data/preferences"
    cache_backend: str = "memory"
    cache_path: str = "data/cache"
    currency_symbol: str = "£"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "AnalyticsConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default; environment variables take precedence over file values.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        cache_backend = str(get_value("cache_backend", "memory") or "memory").lower()
        if cache_backend not in CACHE_BACKENDS:
            raise ValueError(f"Unsupported cache_backend '{cache_backend}'. Allowed: {list(CACHE_BACKENDS)}")

        ttl_raw = get_value("gap_cache_ttl_seconds", str(DEFAULT_GAP_CACHE_TTL_SECONDS))
        try:
            gap_cache_ttl_seconds = int(str(ttl_raw))
        except ValueError as exc:
            raise ValueError(f"gap_cache_ttl_seconds must be an integer, got '{ttl_raw}'") from exc

        return cls(
            neglect_threshold_days=resolve_neglect_threshold(get_value("neglect_threshold_days")),
            gap_cache_ttl_seconds=gap_cache_ttl_seconds,
            preferences_path=str(get_value("preferences_path", "data/preferences")),
            cache_backend=cache_backend,
            cache_path=str(get_value("cache_path", "data/cache")),
            currency_symbol=str(get_value("currency_symbol", "£")),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
