"""In-memory timeline document: takes, segments, tracks and the project.

This is the reference host behind the host protocols. It keeps the whole
timeline in memory and round-trips it through JSON so the CLI and tests have
something concrete to edit. Times are stored as integer ticks.
"""

from __future__ import annotations

import json
from bisect import insort
from dataclasses import dataclass, field

from ytpglitch.errors import TransactionError
from ytpglitch.timecode import Timecode, ZERO


def _read_time(d: dict, key: str, default: Timecode | None = None) -> Timecode:
    """Read `key` as ticks, or `key_ms` as milliseconds."""
    if key in d:
        return Timecode(int(d[key]))
    if f"{key}_ms" in d:
        return Timecode.from_milliseconds(d[f"{key}_ms"])
    if default is not None:
        return default
    raise KeyError(key)


@dataclass
class Take:
    """One media reference of a segment."""
    media: str
    offset: Timecode = ZERO    # where the segment's first frame sits in the source
    reversed: bool = False

    def portion(self, length: Timecode, begin: Timecode, end: Timecode) -> Take:
        """Take covering [begin, end) of a segment of the given length.

        A reversed take plays its source backwards, so the timeline's left
        edge maps to the source's right edge.
        """
        if self.reversed:
            offset = self.offset + (length - end)
        else:
            offset = self.offset + begin
        return Take(self.media, offset, self.reversed)

    def to_dict(self) -> dict:
        return {
            "media": self.media,
            "offset": int(self.offset.ticks),
            "reversed": bool(self.reversed),
        }

    @classmethod
    def from_dict(cls, d: dict) -> Take:
        return cls(
            media=d["media"],
            offset=_read_time(d, "offset", ZERO),
            reversed=bool(d.get("reversed", False)),
        )


@dataclass(eq=False)
class Segment:
    """A bounded piece of media placed on a track.

    Segments compare by identity: two segments with the same media and
    position are still two different events on the timeline.
    """
    start: Timecode
    length: Timecode
    takes: list[Take] = field(default_factory=list)
    pitch: float = 1.0
    selected: bool = False
    annotations: list[dict] = field(default_factory=list)

    def __post_init__(self):
        if self.length.ticks <= 0:
            raise ValueError(f"Segment length must be positive, got {self.length.ticks} ticks")

    @classmethod
    def of(cls, media: str, start_ms: float, length_ms: float, offset_ms: float = 0.0) -> Segment:
        return cls(
            start=Timecode.from_milliseconds(start_ms),
            length=Timecode.from_milliseconds(length_ms),
            takes=[Take(media, Timecode.from_milliseconds(offset_ms))],
        )

    @property
    def end(self) -> Timecode:
        return self.start + self.length

    @property
    def media(self) -> str | None:
        return self.takes[0].media if self.takes else None

    @property
    def reversed(self) -> bool:
        """Direction of the active (first) take."""
        return self.takes[0].reversed if self.takes else False

    def overlaps(self, start: Timecode, end: Timecode) -> bool:
        return self.start < end and start < self.end

    def layout(self) -> tuple[int, int, str | None, bool]:
        """Position summary used for layout comparison."""
        return (self.start.ticks, self.length.ticks, self.media, self.reversed)

    def to_dict(self) -> dict:
        return {
            "start": int(self.start.ticks),
            "length": int(self.length.ticks),
            "pitch": float(self.pitch),
            "selected": bool(self.selected),
            "takes": [t.to_dict() for t in self.takes],
            "annotations": list(self.annotations),
        }

    @classmethod
    def from_dict(cls, d: dict) -> Segment:
        return cls(
            start=_read_time(d, "start"),
            length=_read_time(d, "length"),
            takes=[Take.from_dict(t) for t in d.get("takes", [])],
            pitch=float(d.get("pitch", 1.0)),
            selected=bool(d.get("selected", False)),
            annotations=list(d.get("annotations", [])),
        )


class Track:
    """Segments sorted by start position."""

    def __init__(self, name: str = "", segments: list[Segment] | None = None, selected: bool = False):
        self.name = name
        self.selected = selected
        self._segments: list[Segment] = []
        for segment in segments or []:
            self.add_segment(segment)

    @property
    def segments(self) -> tuple[Segment, ...]:
        return tuple(self._segments)

    def add_segment(self, segment: Segment) -> None:
        insort(self._segments, segment, key=lambda s: s.start)

    def remove_segment(self, segment: Segment) -> None:
        self._segments.remove(segment)

    def resort(self) -> None:
        self._segments.sort(key=lambda s: s.start)

    @property
    def duration(self) -> Timecode:
        if not self._segments:
            return ZERO
        return max(s.end for s in self._segments)

    def layout(self) -> list[tuple[int, int, str | None, bool]]:
        return [s.layout() for s in self._segments]

    def __len__(self) -> int:
        return len(self._segments)

    def __repr__(self) -> str:
        return f"Track({self.name!r}, {len(self._segments)} segments)"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "selected": bool(self.selected),
            "segments": [s.to_dict() for s in self._segments],
        }

    @classmethod
    def from_dict(cls, d: dict) -> Track:
        return cls(
            name=d.get("name", ""),
            segments=[Segment.from_dict(s) for s in d.get("segments", [])],
            selected=bool(d.get("selected", False)),
        )


class Project:
    """In-memory host project with a flat undo history.

    Transactions do not nest: opening a second one, or closing one with a
    different label, is a TransactionError.
    """

    def __init__(self, tracks: list[Track] | None = None):
        self._tracks = list(tracks or [])
        self.history: list[str] = []
        self._open: str | None = None

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    @property
    def in_transaction(self) -> bool:
        return self._open is not None

    def begin_transaction(self, label: str) -> None:
        if self._open is not None:
            raise TransactionError(f"Transaction {self._open!r} is already open")
        self._open = label

    def end_transaction(self, label: str) -> None:
        if self._open != label:
            raise TransactionError(f"Cannot close {label!r}: open transaction is {self._open!r}")
        self._open = None
        self.history.append(label)

    def to_dict(self) -> dict:
        return {"tracks": [t.to_dict() for t in self._tracks]}

    def save(self, path: str) -> None:
        """Serialize to JSON."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, d: dict) -> Project:
        return cls(tracks=[Track.from_dict(t) for t in d.get("tracks", [])])

    @classmethod
    def load(cls, path: str) -> Project:
        """Deserialize from JSON."""
        with open(path) as f:
            return cls.from_dict(json.load(f))
