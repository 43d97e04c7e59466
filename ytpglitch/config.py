"""Effect configuration records and the run configuration file.

Each compositor gets one frozen config per run. Defaults are the values a
fresh run starts with.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from typing import ClassVar


@dataclass(frozen=True)
class EffectConfig:
    """Base for per-compositor parameters."""
    name: ClassVar[str] = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> EffectConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown {cls.name} option(s): {', '.join(sorted(unknown))}")
        return cls(**d)


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


@dataclass(frozen=True)
class StutterConfig(EffectConfig):
    name: ClassVar[str] = "stutter"
    slice_ms: float = 50
    repeats: int = 8
    pitch_variance: float = 0.0

    def __post_init__(self):
        _require(self.slice_ms >= 1, "stutter slice_ms must be at least 1 ms")
        _require(self.repeats >= 0, "stutter repeats cannot be negative")
        # keeps every pitch factor 1 +/- variance/2 non-negative
        _require(0.0 <= self.pitch_variance <= 2.0, "stutter pitch_variance must be in [0, 2]")


@dataclass(frozen=True)
class StutterPlusConfig(EffectConfig):
    name: ClassVar[str] = "stutter_plus"
    base_ms: int = 40
    max_repeats: int = 20

    def __post_init__(self):
        _require(self.base_ms > 0, "stutter_plus base_ms must be positive")
        _require(self.max_repeats >= 0, "stutter_plus max_repeats cannot be negative")


@dataclass(frozen=True)
class ScrambleConfig(EffectConfig):
    name: ClassVar[str] = "scramble"
    slice_ms: float = 100
    density: float = 0.8

    def __post_init__(self):
        _require(self.slice_ms >= 1, "scramble slice_ms must be at least 1 ms")
        _require(0.0 <= self.density <= 1.0, "scramble density must be in [0, 1]")


@dataclass(frozen=True)
class DanceRaveConfig(EffectConfig):
    name: ClassVar[str] = "dance_rave"
    interval_ms: int = 120

    def __post_init__(self):
        _require(self.interval_ms > 0, "dance_rave interval_ms must be positive")


@dataclass(frozen=True)
class ReverseConfig(EffectConfig):
    name: ClassVar[str] = "reverse"


@dataclass(frozen=True)
class MemeReplaceConfig(EffectConfig):
    name: ClassVar[str] = "meme_replace"
    text: str = "MEME"
    duration_ms: int = 800

    def __post_init__(self):
        _require(self.duration_ms > 0, "meme_replace duration_ms must be positive")


@dataclass(frozen=True)
class StareZoomConfig(EffectConfig):
    name: ClassVar[str] = "stare_zoom"
    zoom_percent: int = 120
    duration_ms: int = 800

    def __post_init__(self):
        _require(self.zoom_percent > 0, "stare_zoom zoom_percent must be positive")
        _require(self.duration_ms > 0, "stare_zoom duration_ms must be positive")


@dataclass(frozen=True)
class EarRapeConfig(EffectConfig):
    name: ClassVar[str] = "ear_rape"
    db_boost: float = 12.0


@dataclass(frozen=True)
class BleepConfig(EffectConfig):
    name: ClassVar[str] = "bleep"
    duration_ms: int = 200
    frequency_hz: int = 1000

    def __post_init__(self):
        _require(self.duration_ms > 0, "bleep duration_ms must be positive")
        _require(self.frequency_hz > 0, "bleep frequency_hz must be positive")


@dataclass(frozen=True)
class RandomSoundConfig(EffectConfig):
    name: ClassVar[str] = "random_sound"
    folder: str = ""


@dataclass(frozen=True)
class AutoPanConfig(EffectConfig):
    name: ClassVar[str] = "auto_pan"
    cycle_ms: int = 800

    def __post_init__(self):
        _require(self.cycle_ms > 0, "auto_pan cycle_ms must be positive")


@dataclass(frozen=True)
class TechTextConfig(EffectConfig):
    name: ClassVar[str] = "tech_text"
    count: int = 2

    def __post_init__(self):
        _require(self.count >= 0, "tech_text count cannot be negative")


@dataclass(frozen=True)
class SpadinnerConfig(EffectConfig):
    name: ClassVar[str] = "spadinner"
    folder: str = ""


# Declared processing order: core compositors first, then capability effects.
CONFIG_TYPES: dict[str, type[EffectConfig]] = {
    cls.name: cls
    for cls in (
        StutterConfig,
        StutterPlusConfig,
        ScrambleConfig,
        DanceRaveConfig,
        ReverseConfig,
        MemeReplaceConfig,
        StareZoomConfig,
        EarRapeConfig,
        BleepConfig,
        RandomSoundConfig,
        AutoPanConfig,
        TechTextConfig,
        SpadinnerConfig,
    )
}

EFFECT_ORDER: tuple[str, ...] = tuple(CONFIG_TYPES)


def effect_config(name: str, params: dict | None = None) -> EffectConfig:
    """Build the config for effect `name` from a plain dict."""
    try:
        cls = CONFIG_TYPES[name]
    except KeyError:
        raise ValueError(f"Unknown effect: {name}") from None
    return cls.from_dict(params or {})


@dataclass
class RunConfig:
    """Everything one pipeline run needs besides the timeline itself."""
    seed: int | None = None
    apply_to_all: bool = False
    effects: list[EffectConfig] = field(default_factory=list)

    @classmethod
    def default(cls) -> RunConfig:
        return cls(effects=[StutterConfig()])

    def enabled(self) -> list[str]:
        return [e.name for e in self.effects]

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "apply_to_all": self.apply_to_all,
            "effects": {e.name: e.to_dict() for e in self.effects},
        }

    def save(self, path: str) -> None:
        """Serialize to JSON."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, d: dict) -> RunConfig:
        return cls(
            seed=d.get("seed"),
            apply_to_all=bool(d.get("apply_to_all", False)),
            effects=[effect_config(name, params) for name, params in d.get("effects", {}).items()],
        )

    @classmethod
    def load(cls, path: str) -> RunConfig:
        """Deserialize from JSON."""
        with open(path) as f:
            return cls.from_dict(json.load(f))
