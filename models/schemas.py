"""
Pydantic schemas for data validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============ Settings File Schemas ============

class GameSection(BaseModel):
    """Game rules overrides."""
    model_config = ConfigDict(extra="forbid")

    win_threshold: Optional[int] = Field(None, ge=1)
    max_points: Optional[int] = Field(None, ge=1, le=999)


class PollSection(BaseModel):
    """Task cadence overrides (milliseconds)."""
    model_config = ConfigDict(extra="forbid")

    buzzer_interval_ms: Optional[int] = Field(None, ge=1, le=1000)
    display_interval_ms: Optional[int] = Field(None, ge=50, le=10_000)
    console_interval_ms: Optional[int] = Field(None, ge=1, le=1000)
    serial_interval_ms: Optional[int] = Field(None, ge=1, le=1000)


class SerialSection(BaseModel):
    """Console link overrides."""
    model_config = ConfigDict(extra="forbid")

    port: Optional[str] = Field(None, min_length=1)
    baudrate: Optional[int] = None
    write_timeout: Optional[float] = Field(None, gt=0)

    @field_validator("baudrate")
    @classmethod
    def standard_baudrate(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v not in (1200, 2400, 4800, 9600, 19200, 38400, 57600, 115200):
            raise ValueError("Baud rate must be a standard rate")
        return v


class SoundSection(BaseModel):
    """Clip file name overrides."""
    model_config = ConfigDict(extra="forbid")

    showdown: Optional[str] = None
    buzzer: Optional[str] = None

    @field_validator("showdown", "buzzer")
    @classmethod
    def wav_file(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.lower().endswith(".wav"):
            raise ValueError("Sound clips must be .wav files")
        return v


class GpioSection(BaseModel):
    """Pin overrides (BCM numbering)."""
    model_config = ConfigDict(extra="forbid")

    team_a_button_pin: Optional[int] = Field(None, ge=0, le=27)
    team_b_button_pin: Optional[int] = Field(None, ge=0, le=27)
    team_a_led_pin: Optional[int] = Field(None, ge=0, le=27)
    team_b_led_pin: Optional[int] = Field(None, ge=0, le=27)
    led_active_high: Optional[bool] = None


class DisplaySection(BaseModel):
    """Display geometry overrides."""
    model_config = ConfigDict(extra="forbid")

    rows: Optional[int] = Field(None, ge=10, le=64)
    cols: Optional[int] = Field(None, ge=12, le=132)


class SettingsFile(BaseModel):
    """Schema for settings.json. Every section is optional."""
    model_config = ConfigDict(extra="forbid")

    game: Optional[GameSection] = None
    poll: Optional[PollSection] = None
    serial: Optional[SerialSection] = None
    sounds: Optional[SoundSection] = None
    gpio: Optional[GpioSection] = None
    display: Optional[DisplaySection] = None


# ============ History Schemas ============

class RoundResponse(BaseModel):
    """Schema for a stored round."""
    model_config = ConfigDict(from_attributes=True)

    round_number: int
    buzzed_team: Optional[str]
    winning_team: Optional[str]
    points: int
    score_a: int
    score_b: int
    completed_at: datetime


class GameResponse(BaseModel):
    """Schema for a stored game."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    win_threshold: int
    started_at: datetime
    finished_at: Optional[datetime]
    winner: Optional[str]
    score_a: int
    score_b: int
    rounds: list[RoundResponse] = []
