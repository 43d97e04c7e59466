"""Host capability plugins: envelopes, generators and sample lookup.

The engine never renders audio or video. Effects that need the host to do
something (draw a volume envelope, generate a text overlay, find a sample on
disk) call a named capability with a segment and a parameter dict. A missing
or failing capability surfaces as CapabilityUnavailable.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import soundfile as sf

from ytpglitch.errors import CapabilityUnavailable
from ytpglitch.timecode import Timecode, ZERO, ms
from ytpglitch.timeline import Segment, Take

logger = logging.getLogger(__name__)

PITCH_SHIFT = "pitch-shift"
VOLUME_ENVELOPE = "volume-envelope"
PAN_ENVELOPE = "pan-envelope"
PAN_CROP = "pan-crop"
TEXT_GENERATOR = "text-generator"
TONE_GENERATOR = "tone-generator"
SAMPLE_LOOKUP = "sample-lookup"

Capability = Callable[[Segment, dict], Any]


class Capabilities:
    """Registry of named host plugins."""

    def __init__(self, plugins: dict[str, Capability] | None = None):
        self._plugins: dict[str, Capability] = dict(plugins or {})

    def register(self, name: str, plugin: Capability) -> None:
        self._plugins[name] = plugin

    def names(self) -> list[str]:
        return sorted(self._plugins)

    def __contains__(self, name: str) -> bool:
        return name in self._plugins

    def invoke(self, name: str, segment: Segment, params: dict) -> Any:
        """Run capability `name` on segment.

        Raises:
            CapabilityUnavailable: nothing is registered under name, or the
                plugin raised.
        """
        plugin = self._plugins.get(name)
        if plugin is None:
            raise CapabilityUnavailable(f"No {name} capability registered")
        try:
            return plugin(segment, params)
        except CapabilityUnavailable:
            raise
        except Exception as exc:
            raise CapabilityUnavailable(f"{name} failed: {exc}") from exc


# --- reference plugins for the JSON timeline ---

def _jsonable(value):
    if isinstance(value, Timecode):
        return value.ticks
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def annotator(name: str) -> Capability:
    """Plugin that records the request on the segment instead of rendering it."""
    def plugin(segment: Segment, params: dict) -> Segment:
        segment.annotations.append({"capability": name, **_jsonable(params)})
        return segment
    return plugin


def tone_generator(segment: Segment, params: dict) -> Segment:
    """Generated-media segment standing in for a sine tone."""
    length = params["length"]
    return Segment(
        start=segment.start,
        length=length,
        takes=[Take(f"tone:{int(params['frequency_hz'])}Hz")],
    )


def folder_samples(segment: Segment, params: dict) -> list[Segment]:
    """List readable audio files in params['folder'] as off-track segments.

    Durations come from soundfile; files it cannot open are skipped. An
    optional params['extensions'] restricts candidates by suffix.
    """
    folder = Path(params.get("folder") or "")
    if not params.get("folder") or not folder.is_dir():
        return []
    extensions = params.get("extensions")

    samples = []
    for path in sorted(folder.iterdir()):
        if not path.is_file():
            continue
        if extensions and path.suffix.lower() not in extensions:
            continue
        try:
            info = sf.info(str(path))
        except RuntimeError:
            logger.debug(f"Skipping unreadable sample {path.name}")
            continue
        length = ms(info.duration * 1000.0)
        if length <= ZERO:
            continue
        samples.append(Segment(start=ZERO, length=length, takes=[Take(str(path))]))
    return samples


def reference_capabilities() -> Capabilities:
    """Capabilities backed by the in-memory timeline and the file system."""
    caps = Capabilities()
    for name in (PITCH_SHIFT, VOLUME_ENVELOPE, PAN_ENVELOPE, PAN_CROP, TEXT_GENERATOR):
        caps.register(name, annotator(name))
    caps.register(TONE_GENERATOR, tone_generator)
    caps.register(SAMPLE_LOOKUP, folder_samples)
    return caps
