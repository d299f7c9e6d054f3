"""
Pop Audio
=========

Fire-and-forget pop tones. The engine only ever goes through
``emit_pop_tone``, which swallows every sink failure so that audio can
never affect or delay scoring.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import numpy as np

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from balloon_pop.round_core.config_loader import AudioConfig, GameConfig, get_config

logger = logging.getLogger(__name__)


class AudioSink(Protocol):
    """Anything that can play a short tone."""

    def play_tone(self, frequency_hz: float, duration_s: float) -> None:
        ...


class NullAudio:
    """Sink that plays nothing (headless runs and tests)."""

    def play_tone(self, frequency_hz: float, duration_s: float) -> None:
        pass


def pop_frequency(combo: int, config: Optional[GameConfig] = None) -> float:
    """Tone frequency for a pop at the given combo level."""
    if config is None:
        config = get_config()
    return config.audio.base_frequency_hz + combo * config.audio.frequency_step_hz


def synthesize_tone(
    frequency_hz: float,
    duration_s: float,
    audio: AudioConfig
) -> np.ndarray:
    """
    Render a sine tone with an exponential gain ramp.

    The gain falls from ``start_gain`` to ``end_gain`` over the duration.

    Returns:
        int16 mono samples.
    """
    count = max(1, int(audio.sample_rate * duration_s))
    t = np.arange(count, dtype=np.float64) / audio.sample_rate
    envelope = audio.start_gain * np.power(
        audio.end_gain / audio.start_gain,
        t / max(duration_s, 1e-9)
    )
    wave = np.sin(2.0 * np.pi * frequency_hz * t) * envelope
    return (wave * 32767).astype(np.int16)


class PygameToneAudio:
    """
    Sink that synthesizes tones with numpy and plays them through
    ``pygame.mixer``. The mixer is initialized on first use.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameToneAudio")

        self._audio = config.audio
        self._ready = False

    def _ensure_mixer(self) -> None:
        if self._ready:
            return
        if not pygame.mixer.get_init():
            pygame.mixer.init(frequency=self._audio.sample_rate, size=-16)
        self._ready = True

    def play_tone(self, frequency_hz: float, duration_s: float) -> None:
        self._ensure_mixer()
        samples = synthesize_tone(frequency_hz, duration_s, self._audio)

        # sndarray wants one column per mixer channel
        _, _, channels = pygame.mixer.get_init()
        if channels > 1:
            samples = np.repeat(samples[:, np.newaxis], channels, axis=1)

        sound = pygame.sndarray.make_sound(np.ascontiguousarray(samples))
        sound.play()


def emit_pop_tone(
    sink: Optional[AudioSink],
    combo: int,
    config: Optional[GameConfig] = None
) -> bool:
    """
    Ask the sink for a pop tone, never raising.

    Args:
        sink: Audio sink, or None for silence.
        combo: Combo level after the pop.
        config: Game configuration. Uses default if None.

    Returns:
        True if the sink accepted the request.
    """
    if sink is None:
        return False
    if config is None:
        config = get_config()

    try:
        sink.play_tone(pop_frequency(combo, config), config.audio.duration_s)
    except Exception as e:
        logger.warning("Pop tone unavailable: %s", e)
        return False
    return True
