"""Tests for capabilities module."""

import numpy as np
import pytest
import soundfile as sf

from ytpglitch.capabilities import (
    Capabilities,
    PAN_CROP,
    SAMPLE_LOOKUP,
    TEXT_GENERATOR,
    TONE_GENERATOR,
    annotator,
    folder_samples,
    reference_capabilities,
    tone_generator,
)
from ytpglitch.errors import CapabilityUnavailable
from ytpglitch.timecode import ms


@pytest.fixture
def sample_dir(tmp_path):
    """Folder with a 500 ms wav, a 250 ms flac, a corrupt wav and a text file."""
    sf.write(str(tmp_path / "a.wav"), np.zeros(4000), 8000)
    sf.write(str(tmp_path / "b.flac"), np.zeros(2000), 8000)
    (tmp_path / "broken.wav").write_bytes(b"RIFF not really")
    (tmp_path / "notes.txt").write_text("not audio")
    (tmp_path / "sub").mkdir()
    return tmp_path


class TestRegistry:
    def test_register_and_invoke(self, segment):
        caps = Capabilities()
        caps.register("echo", lambda seg, params: params["x"])
        assert "echo" in caps
        assert caps.names() == ["echo"]
        assert caps.invoke("echo", segment, {"x": 3}) == 3

    def test_missing(self, segment):
        with pytest.raises(CapabilityUnavailable):
            Capabilities().invoke(TEXT_GENERATOR, segment, {})

    def test_plugin_failure_wrapped(self, segment):
        def broken(seg, params):
            raise OSError("disk gone")

        caps = Capabilities({"broken": broken})
        with pytest.raises(CapabilityUnavailable) as excinfo:
            caps.invoke("broken", segment, {})
        assert isinstance(excinfo.value.__cause__, OSError)
        assert "disk gone" in str(excinfo.value)

    def test_reference_set(self):
        names = reference_capabilities().names()
        assert len(names) == 7
        assert TONE_GENERATOR in names
        assert SAMPLE_LOOKUP in names


def test_annotator_records_ticks(segment):
    annotator(PAN_CROP)(segment, {"keyframes": [(ms(1), 1.0)]})
    assert segment.annotations == [{"capability": PAN_CROP, "keyframes": [[10_000, 1.0]]}]


def test_tone_generator(segment):
    tone = tone_generator(segment, {"frequency_hz": 440, "length": ms(200)})
    assert tone.media == "tone:440Hz"
    assert tone.length == ms(200)


class TestFolderSamples:
    def test_lists_readable_audio(self, segment, sample_dir):
        samples = folder_samples(segment, {"folder": str(sample_dir)})
        assert [s.media.rsplit("/", 1)[-1] for s in samples] == ["a.wav", "b.flac"]
        assert samples[0].length == ms(500)
        assert samples[1].length == ms(250)
        assert all(s.start == ms(0) for s in samples)

    def test_extension_filter(self, segment, sample_dir):
        samples = folder_samples(segment, {"folder": str(sample_dir), "extensions": (".flac",)})
        assert len(samples) == 1
        assert samples[0].media.endswith("b.flac")

    def test_missing_folder(self, segment, tmp_path):
        assert folder_samples(segment, {"folder": str(tmp_path / "nope")}) == []
        assert folder_samples(segment, {"folder": ""}) == []
