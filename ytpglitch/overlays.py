"""Capability-driven effects: overlays, envelopes, bleeps and inserted samples.

None of these edit media themselves. They work out where and how much from
the segment and the random stream, then hand the request to a host
capability. Only bleep and the sample inserts put anything on the track.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ytpglitch.capabilities import (
    Capabilities,
    PAN_CROP,
    PAN_ENVELOPE,
    SAMPLE_LOOKUP,
    TEXT_GENERATOR,
    TONE_GENERATOR,
    VOLUME_ENVELOPE,
)
from ytpglitch.config import (
    AutoPanConfig,
    BleepConfig,
    EarRapeConfig,
    MemeReplaceConfig,
    RandomSoundConfig,
    SpadinnerConfig,
    StareZoomConfig,
    TechTextConfig,
)
from ytpglitch.errors import CapabilityUnavailable
from ytpglitch.rng import RandomStream
from ytpglitch.store import InsertMode, SegmentStore
from ytpglitch.timecode import ms
from ytpglitch.timeline import Segment

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = (".wav", ".mp3", ".aif", ".aiff", ".flac", ".m4a")
TECH_WORDS = ("ERROR", "ACCESS", "0xDEADBEEF", "404", "SYSTEM", "GLITCH", "PROCESS", "STREAM")
SPIKE_SHOULDER_MS = 10


def _caps(capabilities: Capabilities | None) -> Capabilities:
    if capabilities is None:
        raise CapabilityUnavailable("No host capabilities configured")
    return capabilities


def meme_replace(
    store: SegmentStore,
    segment: Segment,
    config: MemeReplaceConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Text overlay over the first duration_ms of the segment."""
    length = min(ms(config.duration_ms), segment.length)
    _caps(capabilities).invoke(
        TEXT_GENERATOR, segment,
        {"text": config.text, "start": segment.start, "length": length},
    )
    return []


def stare_zoom(
    store: SegmentStore,
    segment: Segment,
    config: StareZoomConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Pan/crop push-in centered on the segment's midpoint."""
    length = min(ms(config.duration_ms), segment.length)
    start = segment.start + (segment.length - length).scale(0.5)
    scale = config.zoom_percent / 100.0
    _caps(capabilities).invoke(
        PAN_CROP, segment,
        {"keyframes": [(start, 1.0), (start + length, scale)]},
    )
    return []


def ear_rape(
    store: SegmentStore,
    segment: Segment,
    config: EarRapeConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Short volume spike of db_boost at the segment's midpoint."""
    half = segment.length.scale(0.5)
    mid = segment.start + half
    shoulder = min(ms(SPIKE_SHOULDER_MS), half)
    points = [(mid - shoulder, 0.0), (mid, float(config.db_boost)), (mid + shoulder, 0.0)]
    _caps(capabilities).invoke(VOLUME_ENVELOPE, segment, {"points": points})
    return []


def bleep(
    store: SegmentStore,
    segment: Segment,
    config: BleepConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Overwrite the middle of the segment with a generated tone.

    The tone covers duration_ms (at most the whole segment), centered. If it
    covers the start of the segment, the segment itself is replaced.
    """
    length = min(ms(config.duration_ms), segment.length)
    position = segment.start + (segment.length - length).scale(0.5)
    tone = _caps(capabilities).invoke(
        TONE_GENERATOR, segment,
        {"frequency_hz": config.frequency_hz, "length": length},
    )
    if not isinstance(tone, Segment):
        raise CapabilityUnavailable(f"{TONE_GENERATOR} did not return a segment")
    track = store.track_of(segment)
    store.insert_at(track, tone, position, InsertMode.OVERWRITE)
    return [tone]


def _insert_sample(
    store: SegmentStore,
    segment: Segment,
    folder: str,
    rng: RandomStream,
    capabilities: Capabilities | None,
    extensions: tuple[str, ...] | None = None,
) -> list[Segment]:
    """Pick one sample from folder and ripple-insert it at the segment start."""
    if not folder:
        return []
    params = {"folder": folder}
    if extensions:
        params["extensions"] = extensions
    candidates = _caps(capabilities).invoke(SAMPLE_LOOKUP, segment, params) or []
    if extensions:
        candidates = [c for c in candidates if Path(c.media or "").suffix.lower() in extensions]
    if not candidates:
        logger.debug(f"No samples found in {folder}")
        return []

    pick = rng.choice(candidates)
    track = store.track_of(segment)
    store.insert_at(track, pick, segment.start, InsertMode.RIPPLE)
    logger.debug(f"Inserted sample {pick.media} at {pick.start}")
    return [pick]


def random_sound(
    store: SegmentStore,
    segment: Segment,
    config: RandomSoundConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Insert a random audio file from config.folder in front of the segment."""
    return _insert_sample(store, segment, config.folder, rng, capabilities, AUDIO_EXTENSIONS)


def spadinner(
    store: SegmentStore,
    segment: Segment,
    config: SpadinnerConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Like random_sound, but any file the lookup can read is fair game."""
    return _insert_sample(store, segment, config.folder, rng, capabilities)


def auto_pan(
    store: SegmentStore,
    segment: Segment,
    config: AutoPanConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Hard left/right pan points every cycle_ms across the segment."""
    cycle = ms(config.cycle_ms)
    points = []
    t = segment.start
    while t < segment.end:
        points.append((t, -1.0 if len(points) % 2 == 0 else 1.0))
        t = t + cycle
    _caps(capabilities).invoke(PAN_ENVELOPE, segment, {"points": points})
    return []


def tech_text(
    store: SegmentStore,
    segment: Segment,
    config: TechTextConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """`count` short overlays of random tech words at random positions."""
    caps = _caps(capabilities)
    span_ms = max(1, int(segment.length.to_milliseconds()))
    for _ in range(config.count):
        word = rng.choice(TECH_WORDS)
        length = ms(rng.next_int(150, 1200))
        position = segment.start + ms(rng.next_int(0, span_ms))
        caps.invoke(TEXT_GENERATOR, segment, {"text": word, "start": position, "length": length})
    return []
