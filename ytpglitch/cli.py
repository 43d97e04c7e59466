"""Unified CLI entry point for ytp-glitch."""

import argparse
import json
import logging
import sys

from ytpglitch.capabilities import reference_capabilities
from ytpglitch.config import (
    AutoPanConfig,
    BleepConfig,
    DanceRaveConfig,
    EarRapeConfig,
    MemeReplaceConfig,
    RandomSoundConfig,
    ReverseConfig,
    RunConfig,
    ScrambleConfig,
    SpadinnerConfig,
    StareZoomConfig,
    StutterConfig,
    StutterPlusConfig,
    TechTextConfig,
)
from ytpglitch.pipeline import Pipeline, select_targets
from ytpglitch.timeline import Project


def _add_seed_arg(parser):
    parser.add_argument("-seed", "--seed", type=int, default=None,
                        help="Random seed for reproducibility")


def _add_output_arg(parser):
    parser.add_argument("-o", "--output", required=True,
                        help="Output file path")


def _add_effect_args(p):
    """Add one switch per effect plus its tuning options."""
    g = p.add_argument_group("core effects")
    g.add_argument("--stutter", action="store_true", help="Stutter loop")
    g.add_argument("--stutter-ms", type=float, default=50)
    g.add_argument("--stutter-repeats", type=int, default=8)
    g.add_argument("--stutter-pitch", type=float, default=0.0,
                   help="Pitch variance per copy")
    g.add_argument("--stutter-plus", action="store_true",
                   help="Stutter loop plus (varied repeats)")
    g.add_argument("--stutter-plus-ms", type=int, default=40)
    g.add_argument("--stutter-plus-repeats", type=int, default=20)
    g.add_argument("--scramble", action="store_true", help="Scrambling / random chops")
    g.add_argument("--scramble-ms", type=float, default=100)
    g.add_argument("--scramble-density", type=float, default=0.8)
    g.add_argument("--rave", action="store_true", help="Dance / rave quick-cuts")
    g.add_argument("--rave-ms", type=int, default=120)
    g.add_argument("--reverse", action="store_true", help="Reverse clip")

    g = p.add_argument_group("host effects")
    g.add_argument("--meme", action="store_true", help="Meme replacement (text overlay)")
    g.add_argument("--meme-text", type=str, default="MEME")
    g.add_argument("--meme-ms", type=int, default=800)
    g.add_argument("--zoom", action="store_true", help="Stare down / zoom")
    g.add_argument("--zoom-percent", type=int, default=120)
    g.add_argument("--zoom-ms", type=int, default=800)
    g.add_argument("--ear-rape", action="store_true", help="Volume burst")
    g.add_argument("--ear-rape-db", type=float, default=12.0)
    g.add_argument("--bleep", action="store_true", help="Audio bleep / censor")
    g.add_argument("--bleep-ms", type=int, default=200)
    g.add_argument("--bleep-hz", type=int, default=1000)
    g.add_argument("--random-sound", type=str, default=None, metavar="FOLDER",
                   help="Insert a random audio sample from FOLDER")
    g.add_argument("--pan", action="store_true", help="Auto panning (L-R)")
    g.add_argument("--pan-ms", type=int, default=800)
    g.add_argument("--tech-text", action="store_true", help="Random tech text overlays")
    g.add_argument("--tech-count", type=int, default=2)
    g.add_argument("--spadinner", type=str, default=None, metavar="FOLDER",
                   help="Insert a random file from FOLDER")


def _get_effects(args):
    """Build effect configs for every switch set on the command line."""
    effects = []
    if args.stutter:
        effects.append(StutterConfig(slice_ms=args.stutter_ms, repeats=args.stutter_repeats,
                                     pitch_variance=args.stutter_pitch))
    if args.stutter_plus:
        effects.append(StutterPlusConfig(base_ms=args.stutter_plus_ms,
                                         max_repeats=args.stutter_plus_repeats))
    if args.scramble:
        effects.append(ScrambleConfig(slice_ms=args.scramble_ms, density=args.scramble_density))
    if args.rave:
        effects.append(DanceRaveConfig(interval_ms=args.rave_ms))
    if args.reverse:
        effects.append(ReverseConfig())
    if args.meme:
        effects.append(MemeReplaceConfig(text=args.meme_text, duration_ms=args.meme_ms))
    if args.zoom:
        effects.append(StareZoomConfig(zoom_percent=args.zoom_percent, duration_ms=args.zoom_ms))
    if args.ear_rape:
        effects.append(EarRapeConfig(db_boost=args.ear_rape_db))
    if args.bleep:
        effects.append(BleepConfig(duration_ms=args.bleep_ms, frequency_hz=args.bleep_hz))
    if args.random_sound:
        effects.append(RandomSoundConfig(folder=args.random_sound))
    if args.pan:
        effects.append(AutoPanConfig(cycle_ms=args.pan_ms))
    if args.tech_text:
        effects.append(TechTextConfig(count=args.tech_count))
    if args.spadinner:
        effects.append(SpadinnerConfig(folder=args.spadinner))
    return effects


def _build_run_config(args) -> RunConfig:
    """Merge --config file, effect switches and --seed/--all into one RunConfig.

    Switches replace the file's config for the same effect. With neither a
    file nor any switch, the default run (plain stutter) is used.
    """
    run_config = RunConfig.load(args.config) if args.config else RunConfig()
    cli_effects = _get_effects(args)
    if cli_effects:
        overridden = {e.name for e in cli_effects}
        run_config.effects = [e for e in run_config.effects if e.name not in overridden] + cli_effects
    if not run_config.effects and not args.config:
        run_config.effects = RunConfig.default().effects
    if args.seed is not None:
        run_config.seed = args.seed
    if getattr(args, "all", False):
        run_config.apply_to_all = True
    return run_config


def cmd_apply(args):
    """Run the enabled effects over a timeline document."""
    project = Project.load(args.timeline)
    run_config = _build_run_config(args)
    targets = select_targets(project, apply_to_all=run_config.apply_to_all)
    if not targets:
        print("No segments to process. Select segment(s) or use --all.")
        sys.exit(1)

    pipeline = Pipeline(project, capabilities=reference_capabilities())
    summary = pipeline.run(targets, run_config.effects, seed=run_config.seed)
    project.save(args.output)

    if args.summary:
        with open(args.summary, "w") as f:
            json.dump(summary.to_dict(), f, indent=2)
        print(f"Summary -> {args.summary}")
    for message in summary.messages:
        print(f"  ! {message}")
    print(f"Glitched {summary.processed} segment(s), {summary.failed} with errors "
          f"(seed {summary.seed}) -> {args.output}")


def cmd_show(args):
    """Print the track layout of a timeline document."""
    project = Project.load(args.timeline)
    for track in project.tracks:
        marker = "*" if track.selected else " "
        print(f"{marker} {track.name or '(unnamed)'}: {len(track)} segment(s), {track.duration}")
        for segment in track.segments:
            flags = "".join([
                "S" if segment.selected else "-",
                "R" if segment.reversed else "-",
            ])
            pitch = f" x{segment.pitch:.3f}" if segment.pitch != 1.0 else ""
            print(f"    {segment.start} +{segment.length} [{flags}] {segment.media}{pitch}")


def cmd_config(args):
    """Write a run configuration file."""
    run_config = _build_run_config(args)
    run_config.save(args.output)
    print(f"Config ({', '.join(run_config.enabled())}) -> {args.output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ytpglitch",
        description="Randomized glitch edits for timeline segments",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress (-vv for every edit)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- apply ---
    p = subparsers.add_parser("apply", help="Apply glitch effects to a timeline document")
    p.add_argument("timeline", help="Timeline JSON")
    p.add_argument("--config", type=str, default=None, help="Run configuration JSON")
    p.add_argument("--all", action="store_true",
                   help="Apply to all segments on the active track")
    p.add_argument("--summary", type=str, default=None, help="Write run summary JSON")
    _add_effect_args(p)
    _add_output_arg(p)
    _add_seed_arg(p)
    p.set_defaults(func=cmd_apply)

    # --- show ---
    p = subparsers.add_parser("show", help="Print a timeline's layout")
    p.add_argument("timeline", help="Timeline JSON")
    p.set_defaults(func=cmd_show)

    # --- config ---
    p = subparsers.add_parser("config", help="Write a run configuration file")
    p.add_argument("--config", type=str, default=None, help="Start from this configuration")
    p.add_argument("--all", action="store_true")
    _add_effect_args(p)
    _add_output_arg(p)
    _add_seed_arg(p)
    p.set_defaults(func=cmd_config)

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:])

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    args.func(args)


if __name__ == "__main__":
    main()
