"""Segment store: split, insert, remove and query segments on host tracks.

Every edit the engine makes goes through a SegmentStore. The store keeps an
index of which track owns each segment and guarantees that, between calls,
no track has overlapping or non-positive segments.
"""

from __future__ import annotations

import logging
from enum import Enum

from ytpglitch.errors import GlitchError, NotFound, OutOfRange, Overlap
from ytpglitch.host import HostProject, HostTrack
from ytpglitch.timecode import Timecode, ZERO
from ytpglitch.timeline import Segment

logger = logging.getLogger(__name__)


class InsertMode(Enum):
    RIPPLE = "ripple"          # push later segments forward
    STRICT = "strict"          # refuse to overlap
    OVERWRITE = "overwrite"    # replace whatever the new segment covers


class SegmentStore:
    """Overlap-safe editing over the tracks of a host project.

    Args:
        project: Host project whose tracks are edited.
        mode: Default insert mode. RIPPLE matches push-forward editing;
            OVERWRITE must be asked for per call or configured here.
    """

    def __init__(self, project: HostProject, mode: InsertMode = InsertMode.RIPPLE):
        self.project = project
        self.mode = mode
        self._owner: dict[Segment, HostTrack] = {}
        for track in project.tracks:
            for segment in track.segments:
                self._owner[segment] = track

    # --- queries ---

    def is_tracked(self, segment: Segment) -> bool:
        return segment in self._owner

    def track_of(self, segment: Segment) -> HostTrack:
        try:
            return self._owner[segment]
        except KeyError:
            raise NotFound(f"Segment at {segment.start} is not on any track") from None

    def segment_at(self, track: HostTrack, position: Timecode) -> Segment | None:
        """Segment covering position, or None if position falls in a gap."""
        for segment in track.segments:
            if segment.start <= position < segment.end:
                return segment
            if segment.start > position:
                break
        return None

    def overlapping(self, track: HostTrack, start: Timecode, end: Timecode) -> list[Segment]:
        """Segments intersecting [start, end), in track order."""
        return [s for s in track.segments if s.overlaps(start, end)]

    def check_invariants(self, track: HostTrack) -> None:
        """Raise if the track is unsorted, overlapping or out of sync with the index."""
        prev = None
        for segment in track.segments:
            if segment.length <= ZERO:
                raise ValueError(f"Segment at {segment.start} has non-positive length")
            if self._owner.get(segment) is not track:
                raise NotFound(f"Segment at {segment.start} is not indexed on {track.name!r}")
            if prev is not None:
                if segment.start < prev.start:
                    raise Overlap(f"Track {track.name!r} is not sorted at {segment.start}")
                if prev.end > segment.start:
                    raise Overlap(f"Segments overlap on {track.name!r} at {segment.start}")
            prev = segment

    # --- edits ---

    def split(self, segment: Segment, at: Timecode) -> tuple[Segment, Segment]:
        """Split segment at an absolute position strictly inside it.

        The original segment becomes the left piece; the right piece is a new
        segment placed on the same track. Take offsets are carried so both
        pieces still play the same source material.
        """
        track = self.track_of(segment)
        if not (segment.start < at < segment.end):
            raise OutOfRange(
                f"Split point {at} is not inside segment [{segment.start}, {segment.end})"
            )
        cut = at - segment.start
        length = segment.length
        right = Segment(
            start=at,
            length=length - cut,
            takes=[t.portion(length, cut, length) for t in segment.takes],
            pitch=segment.pitch,
            selected=segment.selected,
        )
        segment.takes = [t.portion(length, ZERO, cut) for t in segment.takes]
        segment.length = cut
        track.add_segment(right)
        self._owner[right] = track
        logger.debug(f"Split {track.name!r} at {at}")
        return segment, right

    def extract_slice(self, segment: Segment, start: Timecode, end: Timecode) -> Segment:
        """Cut [start, end) out of segment and return it off-track.

        The slice keeps its source offset. Its old place on the track is left
        as a gap; callers reinsert it wherever they need it.
        """
        if not (segment.start <= start < end <= segment.end):
            raise OutOfRange(
                f"Slice [{start}, {end}) is not inside segment [{segment.start}, {segment.end})"
            )
        piece = segment
        if start > piece.start:
            _, piece = self.split(piece, start)
        if end < piece.end:
            piece, _ = self.split(piece, end)
        self.remove(piece)
        return piece

    def insert_at(
        self,
        track: HostTrack,
        segment: Segment,
        position: Timecode,
        mode: InsertMode | None = None,
    ) -> Segment:
        """Place a freestanding segment on track at position."""
        mode = mode or self.mode
        if segment in self._owner:
            raise GlitchError(f"Segment at {segment.start} is already on a track")
        end = position + segment.length

        if mode is InsertMode.STRICT:
            hits = self.overlapping(track, position, end)
            if hits:
                raise Overlap(
                    f"[{position}, {end}) collides with segment at {hits[0].start} on {track.name!r}"
                )
        elif mode is InsertMode.RIPPLE:
            straddler = self.segment_at(track, position)
            if straddler is not None and straddler.start < position:
                self.split(straddler, position)
            self._shift(track, position, segment.length)
        elif mode is InsertMode.OVERWRITE:
            self._clear(track, position, end)

        segment.start = position
        track.add_segment(segment)
        self._owner[segment] = track
        logger.debug(f"Inserted {segment.length} at {position} on {track.name!r} ({mode.value})")
        return segment

    def remove(self, segment: Segment, ripple: bool = False) -> None:
        """Delete segment from its track, optionally closing the gap."""
        track = self.track_of(segment)
        track.remove_segment(segment)
        del self._owner[segment]
        if ripple:
            self._shift(track, segment.end, segment.length, backward=True)
        logger.debug(f"Removed [{segment.start}, {segment.end}) from {track.name!r}")

    def reverse_in_place(self, segment: Segment) -> None:
        """Toggle playback direction on every take; position and length stay."""
        self.track_of(segment)
        for take in segment.takes:
            take.reversed = not take.reversed

    # --- helpers ---

    def _shift(self, track: HostTrack, position: Timecode, delta: Timecode, backward: bool = False) -> None:
        """Move every segment starting at or after position by delta."""
        for segment in track.segments:
            if segment.start >= position:
                if backward:
                    segment.start = segment.start - delta
                else:
                    segment.start = segment.start + delta
        track.resort()

    def _clear(self, track: HostTrack, start: Timecode, end: Timecode) -> None:
        """Remove all material in [start, end), splitting segments at the edges."""
        for segment in self.overlapping(track, start, end):
            piece = segment
            if piece.start < start:
                _, piece = self.split(piece, start)
            if piece.end > end:
                piece, _ = self.split(piece, end)
            self.remove(piece)
