"""Chop effects: scramble, rave quick-cuts and reversal."""

from __future__ import annotations

import logging

from ytpglitch.capabilities import Capabilities
from ytpglitch.config import DanceRaveConfig, ReverseConfig, ScrambleConfig
from ytpglitch.primitives import extract, partition, reinsert_at, reverse_in_place
from ytpglitch.rng import RandomStream
from ytpglitch.store import InsertMode, SegmentStore
from ytpglitch.timecode import ZERO, ms
from ytpglitch.timeline import Segment

logger = logging.getLogger(__name__)


def scramble(
    store: SegmentStore,
    segment: Segment,
    config: ScrambleConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Chop segment into fixed slices, drop some, shuffle the rest.

    Like shuffling a deck of cards on the timeline. Each of the
    max(1, length // slice_ms) slices survives with probability `density`.
    The whole partitioned span is lifted out and the survivors are laid back
    down in shuffled order from the segment's original start; everything
    after moves to close the gap. Material past the last whole slice is not
    touched and follows the survivors.

    Returns:
        The surviving slices in their new timeline order.
    """
    track = store.track_of(segment)
    origin = segment.start
    bounds = partition(segment, ms(config.slice_ms))
    keep = [rng.next_float() < config.density for _ in bounds]

    pieces = []
    rest = segment
    for _, end in bounds:
        if end < rest.end:
            piece, rest = store.split(rest, end)
        else:
            piece = rest
        pieces.append(piece)

    retained = [piece for piece, kept in zip(pieces, keep) if kept]
    for piece in reversed(pieces):
        store.remove(piece, ripple=True)

    order = rng.shuffled(retained)
    position = origin
    for piece in order:
        reinsert_at(store, piece, position, track, InsertMode.RIPPLE)
        position = position + piece.length

    logger.debug(f"Scramble kept {len(order)} of {len(pieces)} slices at {origin}")
    return order


def dance_rave(
    store: SegmentStore,
    segment: Segment,
    config: DanceRaveConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Quick jump-cuts on every interval boundary.

    At each interval_ms boundary a half-interval slice starting a little
    after the boundary (jitter below interval_ms/3) is cut out and dropped
    back into the hole it left, so the segment ends up chopped into
    independent pieces without changing its total length.
    """
    track = store.track_of(segment)
    origin, end = segment.start, segment.end
    interval_ms = int(config.interval_ms)
    interval = ms(interval_ms)
    half = ms(interval_ms // 2)
    cuts = max(1, segment.length // interval)
    jitter_bound = max(1, interval_ms // 3)

    produced = []
    for i in range(cuts):
        t = origin + interval * i + ms(rng.next_int(0, jitter_bound))
        if t >= end or half <= ZERO:
            continue
        host = store.segment_at(track, t)
        if host is None:
            continue
        piece = extract(store, host, t, min(t + half, host.end))
        reinsert_at(store, piece, t, track, InsertMode.STRICT)
        produced.append(piece)

    logger.debug(f"Dance rave made {len(produced)} cuts at {origin}")
    return produced


def reverse(
    store: SegmentStore,
    segment: Segment,
    config: ReverseConfig,
    rng: RandomStream,
    capabilities: Capabilities | None = None,
) -> list[Segment]:
    """Flip playback direction on every take of segment. Produces nothing new."""
    reverse_in_place(store, segment)
    return []
