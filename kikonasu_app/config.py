"""Configuration helpers for the Kikonasu app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

from logic.capsule_math import MAX_GAP_SUGGESTIONS, MIN_CAPSULE_ITEMS
from logic.outfit_generator import GeneratorSettings

_DEFAULTS = GeneratorSettings()
DEFAULT_MAX_SESSIONS = 500


@dataclass
class KikonasuConfig:
    """Configuration values for the Kikonasu app.

    The generator probabilities are tunable per deployment. Only the weather
    API key is a secret; everything else has a usable local default.
    """

    weather_api_key: Optional[str] = None
    weather_units: str = "metric"
    weather_timeout_seconds: float = 5.0
    dress_probability: float = _DEFAULTS.dress_probability
    outerwear_probability: float = _DEFAULTS.outerwear_probability
    accessory_probability: float = _DEFAULTS.accessory_probability
    min_capsule_items: int = MIN_CAPSULE_ITEMS
    max_gap_suggestions: int = MAX_GAP_SUGGESTIONS
    max_sessions: int = DEFAULT_MAX_SESSIONS
    log_level: str = "INFO"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "KikonasuConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets can be
        injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("KIKONASU_CONFIG_DIR", "config/environments"))
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

        def get_float(key: str, default: float) -> float:
            raw = get_value(key)
            return float(raw) if raw not in (None, "") else default

        def get_int(key: str, default: int) -> int:
            raw = get_value(key)
            return int(raw) if raw not in (None, "") else default

        return cls(
            weather_api_key=get_value("openweather_api_key"),
            weather_units=str(get_value("weather_units", "metric") or "metric"),
            weather_timeout_seconds=get_float("weather_timeout_seconds", 5.0),
            dress_probability=get_float("dress_probability", _DEFAULTS.dress_probability),
            outerwear_probability=get_float("outerwear_probability", _DEFAULTS.outerwear_probability),
            accessory_probability=get_float("accessory_probability", _DEFAULTS.accessory_probability),
            min_capsule_items=get_int("min_capsule_items", MIN_CAPSULE_ITEMS),
            max_gap_suggestions=get_int("max_gap_suggestions", MAX_GAP_SUGGESTIONS),
            max_sessions=get_int("max_sessions", DEFAULT_MAX_SESSIONS),
            log_level=str(get_value("log_level", "INFO") or "INFO"),
            environment=env_name,
        )

    def generator_settings(self) -> GeneratorSettings:
        """Generator tunables; raises ``ValueError`` for out-of-range values."""

        return GeneratorSettings(
            dress_probability=self.dress_probability,
            outerwear_probability=self.outerwear_probability,
            accessory_probability=self.accessory_probability,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal flat ``key: value`` YAML file."""

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
