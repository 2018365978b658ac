"""Runtime settings for levari, overridable through LEVARI_* environment variables."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from models.errors import ConfigurationError
from models.playback import DEFAULT_VOLUME

DEFAULT_LOG_DIR = Path.home() / ".local" / "share" / "levari"


@dataclass
class Settings:
    """Application settings.

    Attributes:
        log_dir: Directory holding levari.log
        initial_volume: Volume at startup (0.0 to 1.0)
        volume_step: Amount added or removed by the +/- keys
        status_interval: Seconds between status channel polls
        notice_timeout: Seconds a status message stays on screen
        shutdown_grace: Seconds to wait for the audio thread on quit
    """
    log_dir: Path = field(default_factory=lambda: DEFAULT_LOG_DIR)
    initial_volume: float = DEFAULT_VOLUME
    volume_step: float = 0.05
    status_interval: float = 0.25
    notice_timeout: float = 3.0
    shutdown_grace: float = 0.5

    @property
    def log_file(self) -> Path:
        return self.log_dir / "levari.log"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from defaults and LEVARI_* variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        settings = cls()

        if env.get("LEVARI_LOG_DIR"):
            settings.log_dir = Path(env["LEVARI_LOG_DIR"]).expanduser()

        settings.initial_volume = _read_float(env, "LEVARI_VOLUME", settings.initial_volume, 0.0, 1.0)
        settings.volume_step = _read_float(env, "LEVARI_VOLUME_STEP", settings.volume_step, 0.0, 1.0)
        settings.status_interval = _read_float(env, "LEVARI_STATUS_INTERVAL", settings.status_interval, 0.01, 5.0)
        settings.notice_timeout = _read_float(env, "LEVARI_NOTICE_TIMEOUT", settings.notice_timeout, 0.0, 60.0)
        settings.shutdown_grace = _read_float(env, "LEVARI_SHUTDOWN_GRACE", settings.shutdown_grace, 0.0, 10.0)
        return settings


def _read_float(env: Mapping[str, str], name: str, default: float,
                minimum: float, maximum: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if not minimum <= value <= maximum:
        raise ConfigurationError(f"{name} must be between {minimum} and {maximum}, got {value}")
    return value
