"""Stateless edit primitives built on the segment store."""

from __future__ import annotations

from ytpglitch.host import HostTrack
from ytpglitch.store import InsertMode, SegmentStore
from ytpglitch.timecode import Timecode
from ytpglitch.timeline import Segment, Take


def duplicate(segment: Segment) -> Segment:
    """Off-track copy of segment with the same media, offsets and direction."""
    return Segment(
        start=segment.start,
        length=segment.length,
        takes=[Take(t.media, t.offset, t.reversed) for t in segment.takes],
        pitch=segment.pitch,
    )


def extract(store: SegmentStore, segment: Segment, start: Timecode, end: Timecode) -> Segment:
    """Cut [start, end) out of segment, leaving a gap."""
    return store.extract_slice(segment, start, end)


def reinsert_at(
    store: SegmentStore,
    segment: Segment,
    position: Timecode,
    track: HostTrack | None = None,
    mode: InsertMode | None = None,
) -> Segment:
    """Move segment to position.

    A tracked segment is lifted off its track first (without rippling) and
    lands on the same track unless another one is given. A freestanding
    segment needs an explicit track.
    """
    if store.is_tracked(segment):
        track = track or store.track_of(segment)
        store.remove(segment)
    elif track is None:
        raise ValueError("A freestanding segment needs a target track")
    return store.insert_at(track, segment, position, mode)


def reverse_in_place(store: SegmentStore, segment: Segment) -> Segment:
    store.reverse_in_place(segment)
    return segment


def partition(segment: Segment, slice_len: Timecode) -> list[tuple[Timecode, Timecode]]:
    """Fixed-size slice bounds over segment.

    Yields max(1, length // slice_len) slices; the last bound is clamped to
    the segment's end, so a segment shorter than one slice is a single slice.
    Material past the last whole slice is not part of the partition.
    """
    count = max(1, segment.length // slice_len)
    bounds = []
    for i in range(count):
        start = segment.start + slice_len * i
        end = min(start + slice_len, segment.end)
        bounds.append((start, end))
    return bounds
