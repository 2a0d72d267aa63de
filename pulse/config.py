"""inputpulse configuration. All tunables in one place."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass
class EndpointConfig:
    url: str = field(default_factory=lambda: os.environ.get("PULSE_ENDPOINT_URL", ""))
    keypress_url: str = field(default_factory=lambda: os.environ.get("PULSE_KEYPRESS_URL", ""))
    mouse_url: str = field(default_factory=lambda: os.environ.get("PULSE_MOUSE_URL", ""))
    password: str = field(default_factory=lambda: os.environ.get("PULSE_PASSWORD", ""))
    timeout_s: float | None = field(
        default_factory=lambda: _env_float("PULSE_HTTP_TIMEOUT_S", None)
    )

    def __post_init__(self):
        # Per-report URLs fall back to the shared endpoint
        self.keypress_url = self.keypress_url or self.url
        self.mouse_url = self.mouse_url or self.url


@dataclass
class ReporterConfig:
    interval_s: float = field(default_factory=lambda: _env_float("PULSE_INTERVAL_S", 10.0))
    flush_on_exit: bool = field(default_factory=lambda: _env_bool("PULSE_FLUSH_ON_EXIT", True))

    def __post_init__(self):
        if not self.interval_s > 0:
            raise ValueError(f"PULSE_INTERVAL_S must be positive, got {self.interval_s}")


@dataclass
class Config:
    endpoint: EndpointConfig = field(default_factory=EndpointConfig)
    reporter: ReporterConfig = field(default_factory=ReporterConfig)
    log_level: str = field(
        default_factory=lambda: os.environ.get("PULSE_LOG_LEVEL", "INFO").upper()
    )


def load_config() -> Config:
    """Build a fresh Config from the current environment."""
    return Config()


config = Config()
