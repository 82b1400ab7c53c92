"""
Buzzer Arbiter - Decides which team pressed first.

Buttons are sampled on a fixed cadence and the first sample that sees a
button down while the buzzer window is open wins the round. Nothing else can
win until the round flags are reset, so there is at most one winner per round.
"""

import logging
from typing import Optional, TYPE_CHECKING

from engine.state import SharedState, Team

if TYPE_CHECKING:
    from hardware.audio import SoundLibrary
    from hardware.interfaces import AudioPlayer, Button, Led
    from services.event_bus import EventBus

logger = logging.getLogger(__name__)

# Team A is sampled first, so it wins a same-tick tie.
CHECK_ORDER = (Team.A, Team.B)


class BuzzerArbiter:
    """
    Samples both team buttons and claims the buzz for the first one down.

    Usage:
        arbiter = BuzzerArbiter(state, buttons, leds, audio, sounds)
        worker = PollingWorker("buzzer", arbiter.poll, 100, state.shutdown_event)
        worker.start()
    """

    def __init__(
        self,
        state: SharedState,
        buttons: dict[Team, "Button"],
        leds: dict[Team, "Led"],
        audio: "AudioPlayer",
        sounds: "SoundLibrary",
        buzzer_clip: str = "buzzer",
        event_bus: Optional["EventBus"] = None,
    ):
        """
        Args:
            state: Shared game state
            buttons: {Team: Button} with an is_pressed level
            leds: {Team: Led} with on()/off()
            audio: Player whose play(path) blocks until the clip ends
            sounds: Resolves clip names to asset paths
            buzzer_clip: Name of the buzz sound
            event_bus: Optional signal hub
        """
        self.state = state
        self.buttons = buttons
        self.leds = leds
        self.audio = audio
        self.sounds = sounds
        self.buzzer_clip = buzzer_clip
        self.event_bus = event_bus
        self._lit: Optional[Team] = None

    @property
    def lit_team(self) -> Optional[Team]:
        """Team whose light is currently on."""
        return self._lit

    def poll(self) -> Optional[Team]:
        """
        One sample of both buttons.

        Returns:
            The team that won the buzz on this tick, or None
        """
        self._sync_lights()

        for team in CHECK_ORDER:
            if not self.buttons[team].is_pressed:
                continue
            if self.state.claim_buzz(team):
                self._on_buzz(team)
                return team
            # Buzz already taken this round, or the window is closed.
            break
        return None

    def _on_buzz(self, team: Team) -> None:
        """Light the winner, announce it and play the buzz (blocking)."""
        self._light(team)
        logger.info("Team %s buzzed first", team.value)

        if self.event_bus is not None:
            self.event_bus.buzzer_hit.emit(team.value)

        path = self.sounds.resolve(self.buzzer_clip)
        if path is not None:
            self.audio.play(path)

    def _light(self, team: Team) -> None:
        for other, led in self.leds.items():
            if other == team:
                led.on()
            else:
                led.off()
        self._lit = team

    def _sync_lights(self) -> None:
        """Turn the winner's light off once the next round has reset the flags."""
        if self._lit is None:
            return
        with self.state.lock:
            buzzed = self.state.flags.buzzer_hit
        if not buzzed:
            self.lights_off()

    def lights_off(self) -> None:
        for led in self.leds.values():
            led.off()
        self._lit = None
