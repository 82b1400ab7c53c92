"""
QuizBuzz - Two-team quiz buzzer controller

Entry point for the application.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from config import APP_NAME, APP_VERSION, PATHS, init_config, load_settings
from engine.exceptions import SettingsError

logger = logging.getLogger(__name__)


@click.command(name="quizbuzz")
@click.option("--port", help="Serial port of the judge's console (default from settings).")
@click.option("--baud", type=int, help="Serial baud rate.")
@click.option("--stdio", is_flag=True, help="Use this terminal as the judge's console.")
@click.option("--settings", "settings_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Settings file (default: user config directory).")
@click.option("--threshold", type=click.IntRange(min=1), help="Score that wins the game.")
@click.option("--simulate", is_flag=True, help="Simulated GPIO pins and silent audio.")
@click.option("--no-history", is_flag=True, help="Do not record the game in the history database.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.version_option(APP_VERSION, prog_name=APP_NAME)
def main(port: Optional[str], baud: Optional[int], stdio: bool, settings_path: Optional[Path],
         threshold: Optional[int], simulate: bool, no_history: bool, verbose: bool) -> None:
    """Run a QuizBuzz game until one team reaches the winning score."""
    # Initialize configuration and directories. The terminal hosts the display
    # mirror, so log lines go to the log file only.
    init_config(verbose=verbose, console_log=False)
    click.echo(f"Logging to {PATHS.log_file}", err=True)

    try:
        settings = load_settings(settings_path)
    except SettingsError as e:
        raise click.ClickException(str(e))

    if threshold is not None:
        settings = replace(settings, game=replace(settings.game, win_threshold=threshold))

    # Console link
    if stdio:
        from hardware.serial_link import StdioLink
        link = StdioLink()
    else:
        import serial
        from hardware.serial_link import SerialLink
        try:
            link = SerialLink(port or settings.serial.port,
                              baud or settings.serial.baudrate,
                              settings.serial.write_timeout)
        except serial.SerialException as e:
            raise click.ClickException(f"Cannot open console link: {e}")

    # Buttons, lights, speaker, display
    from hardware.gpio import create_team_io
    from hardware.audio import NullPlayer, WavePlayer
    from hardware.display import TerminalDisplay

    buttons, leds = create_team_io(settings.gpio, simulate=simulate)
    audio = NullPlayer() if simulate else WavePlayer()
    display = TerminalDisplay(settings.display.rows, settings.display.cols)
    display.clear()

    from app import BuzzerApp
    buzz_app = BuzzerApp(settings, link, buttons, leds, audio, display)

    # Game history
    if not no_history:
        from models.base import init_db
        from services.history import GameHistoryRecorder
        init_db()
        GameHistoryRecorder(buzz_app.event_bus)
        logger.info("Recording history in %s", PATHS.database)

    buzz_app.start()
    try:
        buzz_app.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        buzz_app.stop()

    if buzz_app.error is not None:
        sys.exit(1)


if __name__ == "__main__":
    main()
