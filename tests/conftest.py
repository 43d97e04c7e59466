"""Shared test fixtures: small timelines built in memory."""

import pytest

from ytpglitch.rng import RandomStream
from ytpglitch.store import SegmentStore
from ytpglitch.timeline import Project, Segment, Track


def layout(track):
    """(start_ms, length_ms) pairs for every segment on track."""
    return [(s.start.to_milliseconds(), s.length.to_milliseconds()) for s in track.segments]


@pytest.fixture
def segment():
    """1 second clip at the start of the timeline."""
    seg = Segment.of("clip.mp4", 0, 1000)
    seg.selected = True
    return seg


@pytest.fixture
def track(segment):
    return Track("Video 1", [segment], selected=True)


@pytest.fixture
def project(track):
    return Project([track])


@pytest.fixture
def store(project):
    return SegmentStore(project)


@pytest.fixture
def rng():
    return RandomStream(42)


@pytest.fixture
def timeline_file(tmp_path):
    """Timeline JSON with one selected 1 s clip and a trailing clip."""
    first = Segment.of("clip.mp4", 0, 1000)
    first.selected = True
    second = Segment.of("outro.mp4", 1000, 500)
    project = Project([Track("Video 1", [first, second], selected=True)])
    path = str(tmp_path / "timeline.json")
    project.save(path)
    return path
