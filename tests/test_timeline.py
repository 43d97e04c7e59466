"""Tests for timeline module."""

import json

import pytest

from ytpglitch.errors import TransactionError
from ytpglitch.timecode import ms
from ytpglitch.timeline import Project, Segment, Take, Track


class TestTake:
    def test_portion_forward(self):
        take = Take("a.wav", ms(1000))
        part = take.portion(ms(500), ms(200), ms(500))
        assert part.offset == ms(1200)
        assert part.media == "a.wav"

    def test_portion_reversed(self):
        # reversed playback: the timeline's right part plays the source's left part
        take = Take("a.wav", ms(0), reversed=True)
        assert take.portion(ms(500), ms(200), ms(500)).offset == ms(0)
        assert take.portion(ms(500), ms(0), ms(200)).offset == ms(300)


class TestSegment:
    def test_of(self):
        seg = Segment.of("clip.mp4", 100, 250, offset_ms=40)
        assert seg.start == ms(100)
        assert seg.end == ms(350)
        assert seg.media == "clip.mp4"
        assert seg.takes[0].offset == ms(40)
        assert not seg.reversed

    def test_zero_length(self):
        with pytest.raises(ValueError):
            Segment.of("clip.mp4", 0, 0)

    def test_identity(self):
        a = Segment.of("clip.mp4", 0, 100)
        b = Segment.of("clip.mp4", 0, 100)
        assert a != b
        assert len({a, b}) == 2

    def test_overlaps(self):
        seg = Segment.of("clip.mp4", 100, 100)
        assert seg.overlaps(ms(150), ms(300))
        assert not seg.overlaps(ms(200), ms(300))
        assert not seg.overlaps(ms(0), ms(100))

    def test_from_dict_ms_keys(self):
        seg = Segment.from_dict({"start_ms": 10, "length_ms": 20,
                                 "takes": [{"media": "x.wav", "offset_ms": 5}]})
        assert seg.start == ms(10)
        assert seg.length == ms(20)
        assert seg.takes[0].offset == ms(5)


class TestTrack:
    def test_sorted_insertion(self):
        late = Segment.of("b", 500, 100)
        early = Segment.of("a", 0, 100)
        track = Track("t", [late, early])
        assert track.segments == (early, late)

    def test_duration(self):
        track = Track("t", [Segment.of("a", 0, 100), Segment.of("b", 300, 200)])
        assert track.duration == ms(500)
        assert Track("empty").duration == ms(0)


class TestProject:
    def test_transactions(self):
        project = Project()
        project.begin_transaction("edit")
        assert project.in_transaction
        project.end_transaction("edit")
        assert project.history == ["edit"]
        assert not project.in_transaction

    def test_nested_transaction(self):
        project = Project()
        project.begin_transaction("outer")
        with pytest.raises(TransactionError):
            project.begin_transaction("inner")

    def test_mismatched_close(self):
        project = Project()
        with pytest.raises(TransactionError):
            project.end_transaction("never opened")

    def test_save_load(self, tmp_path):
        seg = Segment.of("clip.mp4", 0, 1000, offset_ms=250)
        seg.takes[0].reversed = True
        seg.pitch = 1.25
        seg.annotations.append({"capability": "text-generator", "text": "404"})
        project = Project([Track("Video 1", [seg, Segment.of("b.mp4", 1000, 10)], selected=True)])
        path = str(tmp_path / "timeline.json")
        project.save(path)

        loaded = Project.load(path)
        track = loaded.tracks[0]
        assert track.name == "Video 1"
        assert track.selected
        assert track.layout() == project.tracks[0].layout()
        assert track.segments[0].takes[0].offset == ms(250)
        assert track.segments[0].pitch == 1.25
        assert track.segments[0].annotations[0]["text"] == "404"

    def test_json_uses_ticks(self, tmp_path):
        project = Project([Track("t", [Segment.of("a", 1, 2)])])
        path = str(tmp_path / "t.json")
        project.save(path)
        with open(path) as f:
            data = json.load(f)
        seg = data["tracks"][0]["segments"][0]
        assert seg["start"] == 10_000
        assert seg["length"] == 20_000
