"""
Engine configuration.

Every tunable threshold of the play engine lives here. Values are plain
dataclass fields; the few that are commonly tweaked while tuning can be
overridden via environment variables.
"""

import os
from dataclasses import dataclass, field, fields
from typing import Optional


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


@dataclass
class EngineConfig:
    """Configuration for the play-resolution engine."""

    # Reproducibility - used when no random source is passed in
    seed: Optional[int] = field(default_factory=lambda: _env_int("SANDLOT_SEED", None))

    # Clock
    tick_seconds: float = 0.15
    max_ticks: int = field(default_factory=lambda: _env_int("SANDLOT_MAX_TICKS", 100))
    run_phase_subticks: int = 6
    yac_max_ticks: int = 20

    # Movement
    arrival_radius: float = 0.2
    min_speed_yps: float = 4.5
    max_speed_yps: float = 8.0

    # Battle primitive
    battle_noise: float = field(default_factory=lambda: _env_float("SANDLOT_BATTLE_NOISE", 5.0))
    dominant_win: float = 12.0
    slight_win: float = 4.0
    double_team_bonus: float = 15.0
    stonewall_stun_ticks: int = 3

    # Play action holds rushers for the first few ticks
    play_action_ticks: int = 2
    play_action_bonus: float = 10.0

    # QB decision timing (ticks)
    min_dropback_ticks: int = field(
        default_factory=lambda: _env_int("SANDLOT_MIN_DROPBACK_TICKS", 3)
    )
    decision_base_ticks: int = 6
    decision_iq_divisor: float = 8.0
    open_throw_chance: float = 0.3
    open_throw_ramp: float = 0.03
    throw_deadline_ticks: int = 30
    pressure_grace_ticks: int = 1

    # Coverage / catching
    open_separation: float = 2.0
    contest_noise: float = 10.0
    double_coverage_penalty: float = 10.0
    interception_chance: float = 0.35

    # Turnovers and wear
    fumble_chance: float = 0.03
    injury_chance: float = 0.008
    fatigue_base: float = 0.1
    fatigue_running: float = 0.3
    fatigue_blocking: float = 0.2

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if self.tick_seconds <= 0:
            errors.append("tick_seconds must be positive")
        if self.max_ticks < 4:
            errors.append("max_ticks must allow at least 4 ticks")
        if self.min_speed_yps <= 0 or self.max_speed_yps < self.min_speed_yps:
            errors.append("speed range must be positive and ordered")
        if self.slight_win < 0 or self.dominant_win <= self.slight_win:
            errors.append("dominant_win must exceed slight_win")
        if self.run_phase_subticks < 1:
            errors.append("run_phase_subticks must be at least 1")
        for f in fields(self):
            if f.name.endswith("_chance"):
                value = getattr(self, f.name)
                if not 0.0 <= value <= 1.0:
                    errors.append(f"{f.name} must be within [0, 1]")
        return errors


# Singleton config instance
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the global engine configuration."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def set_config(config: EngineConfig) -> None:
    """
    Replace the global engine configuration.

    Raises:
        ValueError: if the config does not validate
    """
    global _config
    errors = config.validate()
    if errors:
        raise ValueError(f"Invalid engine config: {'; '.join(errors)}")
    _config = config


def reset_config() -> None:
    """Drop the global config so the next get_config() re-reads the environment."""
    global _config
    _config = None
