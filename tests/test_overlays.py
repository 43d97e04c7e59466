"""Tests for overlays module."""

import numpy as np
import pytest
import soundfile as sf

from ytpglitch.capabilities import Capabilities, TONE_GENERATOR, reference_capabilities
from ytpglitch.config import (
    AutoPanConfig,
    BleepConfig,
    EarRapeConfig,
    MemeReplaceConfig,
    RandomSoundConfig,
    SpadinnerConfig,
    StareZoomConfig,
    TechTextConfig,
)
from ytpglitch.errors import CapabilityUnavailable
from ytpglitch.overlays import (
    TECH_WORDS,
    auto_pan,
    bleep,
    ear_rape,
    meme_replace,
    random_sound,
    spadinner,
    stare_zoom,
    tech_text,
)
from ytpglitch.timecode import ms

from conftest import layout


@pytest.fixture
def caps():
    return reference_capabilities()


def test_meme_replace(store, segment, rng, caps):
    assert meme_replace(store, segment, MemeReplaceConfig(text="WOW"), rng, caps) == []
    assert segment.annotations == [{
        "capability": "text-generator",
        "text": "WOW",
        "start": 0,
        "length": ms(800).ticks,
    }]


def test_meme_replace_clamped(store, segment, rng, caps):
    meme_replace(store, segment, MemeReplaceConfig(duration_ms=5000), rng, caps)
    assert segment.annotations[0]["length"] == ms(1000).ticks


def test_stare_zoom_centered(store, segment, rng, caps):
    stare_zoom(store, segment, StareZoomConfig(zoom_percent=150, duration_ms=800), rng, caps)
    assert segment.annotations[0]["keyframes"] == [
        [ms(100).ticks, 1.0],
        [ms(900).ticks, 1.5],
    ]


def test_ear_rape_spike(store, segment, rng, caps):
    ear_rape(store, segment, EarRapeConfig(db_boost=9.0), rng, caps)
    assert segment.annotations[0]["points"] == [
        [ms(490).ticks, 0.0],
        [ms(500).ticks, 9.0],
        [ms(510).ticks, 0.0],
    ]


def test_no_capabilities(store, segment, rng):
    with pytest.raises(CapabilityUnavailable):
        ear_rape(store, segment, EarRapeConfig(), rng, None)


class TestBleep:
    def test_overwrites_middle(self, store, segment, track, rng, caps):
        produced = bleep(store, segment, BleepConfig(duration_ms=200, frequency_hz=800), rng, caps)
        assert layout(track) == [(0, 400), (400, 200), (600, 400)]
        assert produced == [track.segments[1]]
        assert track.segments[1].media == "tone:800Hz"
        assert track.segments[2].takes[0].offset == ms(600)
        store.check_invariants(track)

    def test_covers_whole_segment(self, store, segment, track, rng, caps):
        bleep(store, segment, BleepConfig(duration_ms=5000), rng, caps)
        assert layout(track) == [(0, 1000)]
        assert not store.is_tracked(segment)

    def test_missing_tone(self, store, segment, track, rng):
        with pytest.raises(CapabilityUnavailable):
            bleep(store, segment, BleepConfig(), rng, Capabilities())
        assert layout(track) == [(0, 1000)]

    def test_tone_must_be_segment(self, store, segment, rng):
        caps = Capabilities({TONE_GENERATOR: lambda seg, params: None})
        with pytest.raises(CapabilityUnavailable):
            bleep(store, segment, BleepConfig(), rng, caps)


@pytest.fixture
def sample_dir(tmp_path):
    sf.write(str(tmp_path / "boing.wav"), np.zeros(4000), 8000)
    (tmp_path / "readme.txt").write_text("hello")
    return tmp_path


class TestSamples:
    def test_random_sound_inserts_at_start(self, store, segment, track, rng, caps, sample_dir):
        produced = random_sound(store, segment, RandomSoundConfig(folder=str(sample_dir)), rng, caps)
        assert len(produced) == 1
        assert produced[0].media.endswith("boing.wav")
        assert layout(track) == [(0, 500), (500, 1000)]
        assert track.segments[1] is segment

    def test_spadinner(self, store, segment, track, rng, caps, sample_dir):
        produced = spadinner(store, segment, SpadinnerConfig(folder=str(sample_dir)), rng, caps)
        assert produced[0].media.endswith("boing.wav")
        assert track.duration == ms(1500)

    def test_no_folder(self, store, segment, track, rng):
        assert random_sound(store, segment, RandomSoundConfig(), rng, None) == []
        assert len(track) == 1

    def test_nothing_found(self, store, segment, track, rng, caps, tmp_path):
        (tmp_path / "readme.txt").write_text("hello")
        assert random_sound(store, segment, RandomSoundConfig(folder=str(tmp_path)), rng, caps) == []
        assert len(track) == 1


def test_auto_pan(store, segment, rng, caps):
    auto_pan(store, segment, AutoPanConfig(cycle_ms=300), rng, caps)
    points = segment.annotations[0]["points"]
    assert points == [
        [0, -1.0],
        [ms(300).ticks, 1.0],
        [ms(600).ticks, -1.0],
        [ms(900).ticks, 1.0],
    ]


def test_tech_text(store, segment, rng, caps):
    tech_text(store, segment, TechTextConfig(count=3), rng, caps)
    assert len(segment.annotations) == 3
    for note in segment.annotations:
        assert note["capability"] == "text-generator"
        assert note["text"] in TECH_WORDS
        assert ms(150).ticks <= note["length"] < ms(1200).ticks
        assert 0 <= note["start"] < ms(1000).ticks
    assert rng.draws == 9


def test_tech_text_zero(store, segment, rng, caps):
    tech_text(store, segment, TechTextConfig(count=0), rng, caps)
    assert segment.annotations == []
