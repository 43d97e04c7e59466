"""ytp-glitch: randomized glitch edits over timeline segments."""

from ytpglitch.timecode import Timecode, ms
from ytpglitch.timeline import Take, Segment, Track, Project
from ytpglitch.store import InsertMode, SegmentStore
from ytpglitch.rng import RandomStream
from ytpglitch.capabilities import Capabilities, reference_capabilities
from ytpglitch.pipeline import Pipeline, Summary, run, select_targets

__version__ = "0.1.0"
