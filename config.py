import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


@dataclass(frozen=True)
class Config:
    port: int = 8080
    host: str = "0.0.0.0"
    log_level: str = "INFO"
    debug: bool = False

    def validate(self):
        if not 0 < self.port < 65536:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.port}")
        if not self.host.strip():
            raise ValueError("HOST must not be empty")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown LOG_LEVEL: {self.log_level}")


def _coerce_bool(value):
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value: {value}")


def _coerce_int(value, name):
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid integer for {name}: {value}") from exc


def load_config(env=None):
    """Read settings from ``env``, or from ``.env`` plus the process environment."""
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = os.environ

    port_raw = env.get("PORT")
    debug_raw = env.get("FLASK_DEBUG")

    config = Config(
        port=_coerce_int(port_raw, "PORT") if port_raw else Config.port,
        host=env.get("HOST") or Config.host,
        log_level=(env.get("LOG_LEVEL") or Config.log_level).upper(),
        debug=_coerce_bool(debug_raw) if debug_raw else Config.debug,
    )
    config.validate()
    return config
