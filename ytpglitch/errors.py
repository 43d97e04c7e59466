"""Error taxonomy for timeline edits."""


class GlitchError(Exception):
    """Base class for every failure raised by the engine."""


class OutOfRange(GlitchError, ValueError):
    """A split or slice point lies outside the segment."""


class SegmentTooShort(GlitchError, ValueError):
    """The requested slice is not shorter than the segment."""


class Overlap(GlitchError):
    """An insert collides with an existing segment."""


class NotFound(GlitchError, LookupError):
    """The segment is not on any tracked track."""


class CapabilityUnavailable(GlitchError):
    """A host plugin is missing or failed."""


class NegativeResult(GlitchError, ValueError):
    """Timecode arithmetic would go below zero."""


class TransactionError(GlitchError):
    """The host transaction could not be opened or closed."""
