"""
Sound Effects

Named clips (showdown, buzzer) are looked up in the sounds directory and
played to completion. Playback blocks the calling task; that pause is part of
the game's feel.
"""

import logging
import time
import wave
from pathlib import Path
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

# Sample width in bytes -> numpy dtype
SAMPLE_TYPES = {1: np.uint8, 2: np.int16, 4: np.int32}


class SoundLibrary:
    """
    Resolves clip names to files in a sounds directory.

    Usage:
        sounds = SoundLibrary(PATHS.sounds, {"buzzer": "buzzer.wav"})
        sounds.resolve("buzzer")   # -> Path or None
    """

    def __init__(self, directory: Path, clips: Optional[dict[str, str]] = None):
        """
        Args:
            directory: Folder holding the clip files
            clips: Optional mapping of clip name -> file name
                   (defaults to "<name>.wav")
        """
        self.directory = Path(directory)
        self.clips = dict(clips or {})
        self._warned: set[str] = set()

    def resolve(self, name: str) -> Optional[Path]:
        """Path of a clip, or None (logged once) when the file is missing."""
        path = self.directory / self.clips.get(name, f"{name}.wav")
        if path.is_file():
            return path
        if name not in self._warned:
            self._warned.add(name)
            logger.warning("Sound clip %r not found at %s", name, path)
        return None


def load_wave(path: Path) -> tuple[np.ndarray, int]:
    """
    Read a PCM WAV file.

    Returns:
        (samples shaped (frames, channels), sample_rate)
    """
    with wave.open(str(path), "rb") as wf:
        channels = wf.getnchannels()
        width = wf.getsampwidth()
        rate = wf.getframerate()
        frames = wf.readframes(wf.getnframes())

    if width not in SAMPLE_TYPES:
        raise ValueError(f"Unsupported sample width: {width * 8} bits")

    samples = np.frombuffer(frames, dtype=SAMPLE_TYPES[width])
    return samples.reshape(-1, channels), rate


class WavePlayer:
    """
    Plays WAV clips through the default output device via sounddevice.

    Clips are cached after the first load.
    """

    def __init__(self, device: Optional[int] = None):
        self.device = device
        self._cache: dict[Path, tuple[np.ndarray, int]] = {}

    def play(self, path: Path) -> None:
        """Play a clip and return when it has finished."""
        import sounddevice as sd

        if path not in self._cache:
            self._cache[path] = load_wave(path)
        samples, rate = self._cache[path]

        sd.play(samples, rate, device=self.device)
        sd.wait()


class NullPlayer:
    """
    Stand-in player for simulation: logs the clip and optionally pauses
    for a fixed time to mimic playback.
    """

    def __init__(self, duration_s: float = 0.0):
        self.duration_s = duration_s
        self.played: list[Path] = []

    def play(self, path: Path) -> None:
        logger.info("[sound] %s", Path(path).name)
        self.played.append(Path(path))
        if self.duration_s > 0:
            time.sleep(self.duration_s)
