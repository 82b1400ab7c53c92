"""
QuizBuzz Configuration

Centralized settings, paths, and constants for the application.
"""

import json
import logging
import logging.handlers
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import appdirs
from pydantic import ValidationError

from engine.exceptions import SettingsError


# Application info
APP_NAME = "QuizBuzz"
APP_AUTHOR = "QuizBuzz"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Data directory (stores database, sound clips)
    data_dir: Path = Path(appdirs.user_data_dir(APP_NAME, APP_AUTHOR))

    # Config directory (stores user preferences)
    config_dir: Path = Path(appdirs.user_config_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def database(self) -> Path:
        return self.data_dir / "quizbuzz.db"

    @property
    def settings(self) -> Path:
        return self.config_dir / "settings.json"

    @property
    def sounds(self) -> Path:
        return self.data_dir / "sounds"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "quizbuzz.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.data_dir, self.config_dir, self.log_dir, self.sounds]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class GameSettings:
    """Game rules."""
    # First team to reach this score wins (checked between rounds)
    win_threshold: int = 300

    # Largest score the judge may award in one round
    max_points: int = 999


@dataclass(frozen=True)
class PollSettings:
    """Task cadences in milliseconds."""
    buzzer_interval_ms: int = 100
    display_interval_ms: int = 500
    console_interval_ms: int = 20
    serial_interval_ms: int = 10


@dataclass(frozen=True)
class SerialSettings:
    """Judge console link."""
    port: str = "/dev/ttyACM0"
    baudrate: int = 9600
    write_timeout: float = 0.2


@dataclass(frozen=True)
class SoundSettings:
    """Clip files, relative to the sounds directory."""
    showdown: str = "showdown.wav"
    buzzer: str = "buzzer.wav"

    def clips(self) -> dict[str, str]:
        return {"showdown": self.showdown, "buzzer": self.buzzer}


@dataclass(frozen=True)
class GpioSettings:
    """BCM pin numbers for the team buttons and lights."""
    team_a_button_pin: int = 17
    team_b_button_pin: int = 27
    team_a_led_pin: int = 23
    team_b_led_pin: int = 24
    led_active_high: bool = True


@dataclass(frozen=True)
class DisplaySettings:
    """Character display geometry."""
    rows: int = 16
    cols: int = 18


@dataclass(frozen=True)
class AppSettings:
    """Every settings group, as loaded for one run."""
    game: GameSettings = field(default_factory=GameSettings)
    poll: PollSettings = field(default_factory=PollSettings)
    serial: SerialSettings = field(default_factory=SerialSettings)
    sounds: SoundSettings = field(default_factory=SoundSettings)
    gpio: GpioSettings = field(default_factory=GpioSettings)
    display: DisplaySettings = field(default_factory=DisplaySettings)


# Singleton instance
PATHS = Paths()


def load_settings(path: Optional[Path] = None) -> AppSettings:
    """
    Load settings, applying overrides from a JSON settings file.

    Missing file means defaults. Every group and key is optional in the file.

    Args:
        path: Settings file (defaults to PATHS.settings)

    Returns:
        The merged AppSettings

    Raises:
        SettingsError: If the file is not valid JSON or fails validation
    """
    from models.schemas import SettingsFile

    path = Path(path) if path is not None else PATHS.settings
    settings = AppSettings()
    if not path.exists():
        return settings

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        parsed = SettingsFile.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise SettingsError(f"Invalid settings file {path}: {e}") from e

    overrides = parsed.model_dump(exclude_none=True)
    for group, values in overrides.items():
        current = getattr(settings, group)
        settings = replace(settings, **{group: replace(current, **values)})
    return settings


def configure_logging(verbose: bool = False, log_file: Optional[Path] = None,
                      console: bool = True) -> None:
    """
    Log to stderr and to a rotating file in the log directory.

    Args:
        verbose: Debug level instead of info
        log_file: Rotating log file, or None for no file
        console: Also log to stderr. Off while the terminal shows the
                 display mirror, so log lines do not scroll over it.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"
    )

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def init_config(verbose: bool = False, console_log: bool = True) -> None:
    """Initialize configuration, create required directories and set up logging."""
    PATHS.ensure_directories()
    configure_logging(verbose=verbose, log_file=PATHS.log_file, console=console_log)
