"""
Round Core - The balloon-pop round engine.

This module provides the round simulation and all supporting systems
(spawning, motion, scoring, clock, outcome, snapshots, audio).

Main exports:
- RoundEngine: One round driven by ticks and taps
- GameConfig: Configuration loaded from game_config.yaml
- RoundSnapshot: Read-only state published to subscribers
- classify_outcome: Final score to rating tier
"""

from balloon_pop.round_core.config_loader import GameConfig, load_config
from balloon_pop.round_core.balloon_catalog import BalloonKind, BalloonCatalog
from balloon_pop.round_core.state import Balloon, Phase, RoundState
from balloon_pop.round_core.rng import BalloonSpawner
from balloon_pop.round_core.motion import advance_balloons
from balloon_pop.round_core.scoring import ComboScorer, PopEvent
from balloon_pop.round_core.rules import RoundClock, ClockResult
from balloon_pop.round_core.outcome import Outcome, classify_outcome, PASS_THRESHOLD
from balloon_pop.round_core.state_snapshot import RoundSnapshot, BalloonView
from balloon_pop.round_core.timer import TickTimer
from balloon_pop.round_core.audio import NullAudio, PygameToneAudio, emit_pop_tone
from balloon_pop.round_core.game import RoundEngine, TickResult

__all__ = [
    "GameConfig",
    "load_config",
    "BalloonKind",
    "BalloonCatalog",
    "Balloon",
    "Phase",
    "RoundState",
    "BalloonSpawner",
    "advance_balloons",
    "ComboScorer",
    "PopEvent",
    "RoundClock",
    "ClockResult",
    "Outcome",
    "classify_outcome",
    "PASS_THRESHOLD",
    "RoundSnapshot",
    "BalloonView",
    "TickTimer",
    "NullAudio",
    "PygameToneAudio",
    "emit_pop_tone",
    "RoundEngine",
    "TickResult",
]
