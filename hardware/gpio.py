"""
GPIO buttons and lights via gpiozero.

Buttons are wired to ground with the internal pull-up enabled, so a press
reads as "active". With simulate=True gpiozero's MockFactory stands in for
real pins, and mock pins can be driven from code.
"""

import logging

from gpiozero import Button as GpioButton, Device, LED
from gpiozero.pins.mock import MockFactory

from engine.state import Team

logger = logging.getLogger(__name__)


def use_mock_pins() -> None:
    """Switch gpiozero to simulated pins (no Raspberry Pi required)."""
    Device.pin_factory = MockFactory()
    logger.info("Using simulated GPIO pins")


class TeamButton:
    """Level-read wrapper around a gpiozero Button."""

    def __init__(self, pin: int):
        # No gpiozero debounce: the arbiter samples levels on its own cadence.
        self._button = GpioButton(pin, pull_up=True)
        self.pin = pin

    @property
    def is_pressed(self) -> bool:
        return bool(self._button.is_pressed)

    @property
    def closed(self) -> bool:
        return self._button.closed

    def close(self) -> None:
        """Release the pin."""
        self._button.close()


class TeamLed:
    """On/off wrapper around a gpiozero LED."""

    def __init__(self, pin: int, active_high: bool = True):
        self._led = LED(pin, active_high=active_high)
        self.pin = pin

    def on(self) -> None:
        self._led.on()

    def off(self) -> None:
        self._led.off()

    @property
    def is_lit(self) -> bool:
        return bool(self._led.is_lit)

    @property
    def closed(self) -> bool:
        return self._led.closed

    def close(self) -> None:
        self._led.close()


def create_team_io(settings, simulate: bool = False) -> tuple[dict, dict]:
    """
    Build the buttons and lights for both teams.

    Args:
        settings: GpioSettings with the pin numbers
        simulate: Use mock pins instead of real GPIO

    Returns:
        ({Team: TeamButton}, {Team: TeamLed})
    """
    if simulate:
        use_mock_pins()

    buttons = {
        Team.A: TeamButton(settings.team_a_button_pin),
        Team.B: TeamButton(settings.team_b_button_pin),
    }
    leds = {
        Team.A: TeamLed(settings.team_a_led_pin, settings.led_active_high),
        Team.B: TeamLed(settings.team_b_led_pin, settings.led_active_high),
    }
    return buttons, leds
