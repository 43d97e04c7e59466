"""Transformation pipeline: run enabled effects over a batch of segments.

A run opens one host transaction, walks the target segments and applies
every enabled effect to each in the declared order, then closes the
transaction exactly once. A failing effect is recorded against its segment
and the run moves on; only transaction failures abort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Sequence, Union

from ytpglitch import chop, overlays, stutter
from ytpglitch.capabilities import Capabilities
from ytpglitch.config import CONFIG_TYPES, EFFECT_ORDER, EffectConfig
from ytpglitch.errors import GlitchError, NotFound, TransactionError
from ytpglitch.host import HostProject
from ytpglitch.rng import RandomStream
from ytpglitch.store import InsertMode, SegmentStore
from ytpglitch.timeline import Segment

logger = logging.getLogger(__name__)

TRANSACTION_LABEL = "Apply glitch effects"

Compositor = Callable[..., list[Segment]]

COMPOSITORS: dict[str, Compositor] = {
    "stutter": stutter.stutter,
    "stutter_plus": stutter.stutter_plus,
    "scramble": chop.scramble,
    "dance_rave": chop.dance_rave,
    "reverse": chop.reverse,
    "meme_replace": overlays.meme_replace,
    "stare_zoom": overlays.stare_zoom,
    "ear_rape": overlays.ear_rape,
    "bleep": overlays.bleep,
    "random_sound": overlays.random_sound,
    "auto_pan": overlays.auto_pan,
    "tech_text": overlays.tech_text,
    "spadinner": overlays.spadinner,
}

EffectSpec = Union[EffectConfig, tuple[str, EffectConfig]]


class PipelineState(Enum):
    IDLE = "idle"
    TRANSACTION_OPEN = "transaction_open"
    TRANSACTION_CLOSED = "transaction_closed"


@dataclass
class Failure:
    """One effect that failed on one segment."""
    segment_index: int
    effect: str
    error: str
    message: str

    def __str__(self) -> str:
        where = f"segment {self.segment_index}"
        if self.effect:
            where += f" / {self.effect}"
        return f"{where}: {self.error}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "segment_index": self.segment_index,
            "effect": self.effect,
            "error": self.error,
            "message": self.message,
        }


@dataclass
class Summary:
    """Outcome of a pipeline run."""
    seed: int
    processed: int = 0
    failed: int = 0          # segments with at least one failure
    produced: int = 0        # segments created by effects
    consumed: int = 0        # targets removed from the timeline by an effect
    failures: list[Failure] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [str(f) for f in self.failures]

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "processed": self.processed,
            "failed": self.failed,
            "produced": self.produced,
            "consumed": self.consumed,
            "failures": [f.to_dict() for f in self.failures],
        }


def _plan(effects: Iterable[EffectSpec]) -> list[tuple[str, EffectConfig]]:
    """Validate the enabled effects and sort them into declared order."""
    chosen: dict[str, EffectConfig] = {}
    for item in effects:
        if isinstance(item, EffectConfig):
            name, config = item.name, item
        else:
            name, config = item
        if name not in CONFIG_TYPES:
            raise ValueError(f"Unknown effect: {name}")
        if not isinstance(config, CONFIG_TYPES[name]):
            raise ValueError(f"{name} needs a {CONFIG_TYPES[name].__name__}, got {type(config).__name__}")
        if name in chosen:
            raise ValueError(f"Effect {name} enabled twice")
        chosen[name] = config
    return [(name, chosen[name]) for name in EFFECT_ORDER if name in chosen]


class Pipeline:
    """Applies effects to a batch of segments inside one host transaction.

    Args:
        project: Host project; also the transaction boundary.
        capabilities: Host plugins for the capability-driven effects.
        mode: Default insert mode of the segment store built for each run.
        label: Undo label of the transaction.
    """

    def __init__(
        self,
        project: HostProject,
        capabilities: Capabilities | None = None,
        mode: InsertMode = InsertMode.RIPPLE,
        label: str = TRANSACTION_LABEL,
    ):
        self.project = project
        self.capabilities = capabilities
        self.mode = mode
        self.label = label
        self.state = PipelineState.IDLE
        self.store: SegmentStore | None = None

    def run(
        self,
        targets: Sequence[Segment],
        effects: Iterable[EffectSpec],
        seed: int | None = None,
    ) -> Summary:
        """Apply effects to every target segment.

        Args:
            targets: Segments to transform, processed in this order.
            effects: Enabled effects as configs or (name, config) pairs. The
                order given here is ignored; effects always run in
                EFFECT_ORDER.
            seed: Seed of the run's random stream. None picks one; it is
                reported in the summary.

        Returns:
            Summary of processed segments and recorded failures.

        Raises:
            TransactionError: the host transaction could not be opened or
                closed, or a run is already in progress.
        """
        if self.state is PipelineState.TRANSACTION_OPEN:
            raise TransactionError("Pipeline run already in progress")
        plan = _plan(effects)
        targets = list(targets)
        rng = RandomStream(seed)
        summary = Summary(seed=rng.seed)
        self.store = SegmentStore(self.project, mode=self.mode)

        logger.info(
            f"Applying {', '.join(n for n, _ in plan) or 'no effects'} "
            f"to {len(targets)} segment(s), seed {rng.seed}"
        )
        self._begin()
        self.state = PipelineState.TRANSACTION_OPEN
        try:
            for index, segment in enumerate(targets):
                self._process(index, segment, plan, rng, summary)
        finally:
            self.state = PipelineState.TRANSACTION_CLOSED
            self._end()

        logger.info(
            f"Processed {summary.processed} segment(s), {summary.failed} with failures, "
            f"{summary.produced} new segment(s)"
        )
        return summary

    def _process(
        self,
        index: int,
        segment: Segment,
        plan: list[tuple[str, EffectConfig]],
        rng: RandomStream,
        summary: Summary,
    ) -> None:
        summary.processed += 1
        failures_before = len(summary.failures)

        if not self.store.is_tracked(segment):
            self._record(summary, index, "", NotFound("Target segment is not on any track"))
        else:
            for name, config in plan:
                if not self.store.is_tracked(segment):
                    logger.info(f"Segment {index} was removed by an earlier effect; skipping {name} onwards")
                    break
                try:
                    produced = COMPOSITORS[name](self.store, segment, config, rng, self.capabilities)
                except GlitchError as exc:
                    self._record(summary, index, name, exc)
                except Exception as exc:
                    logger.exception(f"{name} crashed on segment {index}")
                    self._record(summary, index, name, exc)
                else:
                    summary.produced += len(produced)
            if not self.store.is_tracked(segment):
                summary.consumed += 1

        if len(summary.failures) > failures_before:
            summary.failed += 1

    @staticmethod
    def _record(summary: Summary, index: int, effect: str, exc: Exception) -> None:
        failure = Failure(index, effect, type(exc).__name__, str(exc))
        logger.warning(f"Recorded failure: {failure}")
        summary.failures.append(failure)

    def _begin(self) -> None:
        try:
            self.project.begin_transaction(self.label)
        except TransactionError:
            raise
        except Exception as exc:
            raise TransactionError(f"Could not open transaction {self.label!r}: {exc}") from exc

    def _end(self) -> None:
        try:
            self.project.end_transaction(self.label)
        except TransactionError:
            raise
        except Exception as exc:
            raise TransactionError(f"Could not close transaction {self.label!r}: {exc}") from exc


def select_targets(project: HostProject, apply_to_all: bool = False) -> list[Segment]:
    """Segments to process.

    By default every selected segment on any track. With apply_to_all, every
    segment of the selected track, or of the first track if none is
    selected.
    """
    if not apply_to_all:
        return [s for track in project.tracks for s in track.segments if s.selected]
    tracks = list(project.tracks)
    if not tracks:
        return []
    active = next((t for t in tracks if t.selected), tracks[0])
    return list(active.segments)


def run(
    project: HostProject,
    targets: Sequence[Segment],
    effects: Iterable[EffectSpec],
    seed: int | None = None,
    capabilities: Capabilities | None = None,
) -> Summary:
    """One-shot entry point: build a pipeline and run it."""
    return Pipeline(project, capabilities=capabilities).run(targets, effects, seed=seed)
