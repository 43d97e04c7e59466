"""Host object model contracts.

The engine never owns the editor's project. It talks to whatever backs the
timeline through these protocols, so any concrete host (the JSON timeline in
ytpglitch.timeline, or a binding to a real editor) can sit behind the store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from ytpglitch.timeline import Segment


class HostTrack(Protocol):
    """One track of the host project.

    `segments` must be kept sorted by start. The store only ever calls
    add_segment/remove_segment and mutates the start of segments it has
    added, which the host must treat exactly like a user edit.
    """
    name: str
    selected: bool

    @property
    def segments(self) -> Sequence[Segment]: ...

    def add_segment(self, segment: Segment) -> None: ...

    def remove_segment(self, segment: Segment) -> None: ...

    def resort(self) -> None: ...


class TransactionBoundary(Protocol):
    """Undo boundary provided by the host."""

    def begin_transaction(self, label: str) -> None: ...

    def end_transaction(self, label: str) -> None: ...


class HostProject(TransactionBoundary, Protocol):
    @property
    def tracks(self) -> Sequence[HostTrack]: ...
