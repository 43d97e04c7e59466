"""Stutter loops: repeat the head of a segment, pushing the rest forward."""

from __future__ import annotations

import logging

from ytpglitch.capabilities import PITCH_SHIFT, Capabilities
from ytpglitch.config import StutterConfig, StutterPlusConfig
from ytpglitch.errors import SegmentTooShort
from ytpglitch.primitives import duplicate
from ytpglitch.rng import RandomStream
from ytpglitch.store import InsertMode, SegmentStore
from ytpglitch.timecode import Timecode, ms
from ytpglitch.timeline import Segment

logger = logging.getLogger(__name__)

# shortest slice stutter_plus will cut
MIN_SLICE_MS = 10


def _stutter(
    store: SegmentStore,
    segment: Segment,
    slice_len: Timecode,
    repeats: int,
    variance: float,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> tuple[list[Segment], Segment]:
    """Split off the head of segment and ripple-insert copies after it.

    Returns (copies, remainder) where remainder is the rest of the original
    material, now sitting after the last copy. With a pitch variance and a
    host pitch-shift plugin, each copy's pitch is also handed to the host.
    """
    if slice_len >= segment.length:
        raise SegmentTooShort(
            f"Slice of {slice_len.to_milliseconds()} ms does not fit in "
            f"{segment.length.to_milliseconds()} ms segment"
        )
    track = store.track_of(segment)
    head, rest = store.split(segment, segment.start + slice_len)

    shift_pitch = variance > 0 and capabilities is not None and PITCH_SHIFT in capabilities
    copies = []
    for i in range(repeats):
        copy = duplicate(head)
        # uniform in [1 - variance/2, 1 + variance/2)
        copy.pitch = head.pitch * (1.0 + (rng.next_float() - 0.5) * variance)
        store.insert_at(track, copy, head.end + slice_len * i, InsertMode.RIPPLE)
        if shift_pitch:
            capabilities.invoke(PITCH_SHIFT, copy, {"factor": copy.pitch})
        copies.append(copy)

    logger.debug(f"Stutter x{repeats} of {slice_len.to_milliseconds()} ms at {head.start}")
    return copies, rest


def stutter(
    store: SegmentStore,
    segment: Segment,
    config: StutterConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Repeat the first slice_ms of segment `repeats` times.

    The slice stays where it was and the copies follow it back to back, so
    the original slice plays repeats + 1 times before the rest of the clip,
    which moves forward by repeats * slice_ms.

    Args:
        store: Segment store owning the segment's track.
        segment: Target segment; becomes the head slice.
        config: Slice length, repeat count and pitch variance.
        rng: Shared random stream (one draw per copy).
        capabilities: Host plugins; pitch-shift receives each copy's pitch
            when pitch_variance is set.

    Returns:
        The inserted copies, in timeline order.
    """
    copies, _ = _stutter(
        store, segment, ms(config.slice_ms), config.repeats, config.pitch_variance, rng,
        capabilities,
    )
    return copies


def stutter_plus(
    store: SegmentStore,
    segment: Segment,
    config: StutterPlusConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Randomized run of stutter bursts walking through the segment.

    Picks a burst count in [4, max(5, max_repeats)). Each burst stutters the
    material left over by the previous one with a slice of
    base_ms +/- base_ms/2 (at least 10 ms), 2-7 repeats and a pitch variance
    up to 0.1. The first burst fails like stutter does; later bursts end the
    run quietly once the remainder is too short.
    """
    count = rng.next_int(4, max(5, config.max_repeats))
    base = int(config.base_ms)
    half = base // 2

    produced = []
    target = segment
    for i in range(count):
        jitter = rng.next_int(-half, half) if half > 0 else 0
        slice_len = ms(max(MIN_SLICE_MS, base + jitter))
        repeats = rng.next_int(2, 8)
        variance = 0.1 * rng.next_float()

        if i > 0 and slice_len >= target.length:
            logger.debug(f"stutter_plus stopped after {i} of {count} bursts")
            break
        copies, target = _stutter(store, target, slice_len, repeats, variance, rng, capabilities)
        produced.extend(copies)

    return produced
