"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class FieldConfig:
    """Play field geometry, in percent of field width/height."""
    x_max: float    # Horizontal spawn range [0, x_max)
    entry_y: float  # Vertical spawn coordinate (outside the visible range)
    exit_y: float   # Balloons at or below this height are removed


@dataclass(frozen=True)
class SpawnConfig:
    """Spawner parameters."""
    probability: float
    speed_min: float
    speed_max: float
    palette: Tuple[Tuple[int, int, int], ...]


@dataclass(frozen=True)
class BalloonKindConfig:
    """Configuration for a single balloon kind."""
    name: str
    threshold: float     # Upper bound (exclusive) of the kind draw
    base_points: int
    size: int            # Diameter in pixels
    border_width: int    # Visual weight of the outline


@dataclass(frozen=True)
class ComboConfig:
    """Combo window parameters."""
    window_ms: float
    bonus_per_level: int


@dataclass(frozen=True)
class ClockConfig:
    """Round countdown parameters."""
    round_seconds: int
    tick_seconds: float


@dataclass(frozen=True)
class AudioConfig:
    """Pop tone parameters."""
    base_frequency_hz: float
    frequency_step_hz: float
    duration_s: float
    start_gain: float
    end_gain: float
    sample_rate: int


@dataclass(frozen=True)
class TimerConfig:
    """Tick timer limits."""
    max_catch_up_ticks: int


@dataclass(frozen=True)
class SnapshotConfig:
    """Snapshot array packing parameters."""
    max_balloons: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    field: FieldConfig
    spawn: SpawnConfig
    kinds: Tuple[BalloonKindConfig, ...]
    combo: ComboConfig
    clock: ClockConfig
    audio: AudioConfig
    timer: TimerConfig
    snapshot: SnapshotConfig

    @property
    def num_kinds(self) -> int:
        """Number of balloon kinds."""
        return len(self.kinds)

    def get_kind(self, name: str) -> BalloonKindConfig:
        """Get kind config by name."""
        for kind in self.kinds:
            if kind.name == name:
                return kind
        raise ValueError(f"Invalid balloon kind: {name}")


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_kind(kind_data: dict) -> BalloonKindConfig:
    """Parse a single balloon kind from YAML."""
    return BalloonKindConfig(
        name=str(kind_data["name"]),
        threshold=float(kind_data["threshold"]),
        base_points=int(kind_data["base_points"]),
        size=int(kind_data["size"]),
        border_width=int(kind_data.get("border_width", 0))
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if not config.kinds:
        raise ValueError("At least one balloon kind is required")

    # Thresholds partition [0, 1) in order
    previous = 0.0
    for kind in config.kinds:
        if kind.threshold <= previous:
            raise ValueError(
                f"Kind thresholds must be strictly increasing, "
                f"got {kind.threshold} after {previous} for '{kind.name}'"
            )
        previous = kind.threshold
    if config.kinds[-1].threshold != 1.0:
        raise ValueError(
            f"Last kind threshold must be 1.0, got {config.kinds[-1].threshold}"
        )

    names = [kind.name for kind in config.kinds]
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate balloon kind names: {names}")

    if not 0.0 <= config.spawn.probability <= 1.0:
        raise ValueError(f"spawn.probability must be in [0, 1], got {config.spawn.probability}")

    if config.spawn.speed_min <= 0 or config.spawn.speed_max < config.spawn.speed_min:
        raise ValueError(
            f"Invalid speed range [{config.spawn.speed_min}, {config.spawn.speed_max}]"
        )

    if not config.spawn.palette:
        raise ValueError("spawn.palette must contain at least one color")

    if config.field.exit_y >= config.field.entry_y:
        raise ValueError(
            f"field.exit_y ({config.field.exit_y}) must be below "
            f"field.entry_y ({config.field.entry_y})"
        )

    if config.clock.round_seconds <= 0:
        raise ValueError(f"clock.round_seconds must be positive, got {config.clock.round_seconds}")

    if config.clock.tick_seconds <= 0:
        raise ValueError(f"clock.tick_seconds must be positive, got {config.clock.tick_seconds}")

    if config.timer.max_catch_up_ticks < 1:
        raise ValueError(
            f"timer.max_catch_up_ticks must be at least 1, got {config.timer.max_catch_up_ticks}"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    field_data = raw["field"]
    field = FieldConfig(
        x_max=float(field_data["x_max"]),
        entry_y=float(field_data["entry_y"]),
        exit_y=float(field_data["exit_y"])
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        probability=float(spawn_data["probability"]),
        speed_min=float(spawn_data["speed_min"]),
        speed_max=float(spawn_data["speed_max"]),
        palette=tuple(_parse_color(c) for c in spawn_data["palette"])
    )

    kinds = tuple(_parse_kind(k) for k in raw["kinds"])

    combo_data = raw["combo"]
    combo = ComboConfig(
        window_ms=float(combo_data["window_ms"]),
        bonus_per_level=int(combo_data["bonus_per_level"])
    )

    clock_data = raw["clock"]
    clock = ClockConfig(
        round_seconds=int(clock_data["round_seconds"]),
        tick_seconds=float(clock_data.get("tick_seconds", 1.0))
    )

    # Audio and the remaining sections are optional
    audio_data = raw.get("audio", {})
    audio = AudioConfig(
        base_frequency_hz=float(audio_data.get("base_frequency_hz", 800)),
        frequency_step_hz=float(audio_data.get("frequency_step_hz", 100)),
        duration_s=float(audio_data.get("duration_s", 0.1)),
        start_gain=float(audio_data.get("start_gain", 0.1)),
        end_gain=float(audio_data.get("end_gain", 0.01)),
        sample_rate=int(audio_data.get("sample_rate", 44100))
    )

    timer_data = raw.get("timer", {})
    timer = TimerConfig(
        max_catch_up_ticks=int(timer_data.get("max_catch_up_ticks", 2))
    )

    snapshot_data = raw.get("snapshot", {})
    snapshot = SnapshotConfig(
        max_balloons=int(snapshot_data.get("max_balloons", 64))
    )

    config = GameConfig(
        field=field,
        spawn=spawn,
        kinds=kinds,
        combo=combo,
        clock=clock,
        audio=audio,
        timer=timer,
        snapshot=snapshot
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
