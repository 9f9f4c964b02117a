"""CLI for rendering a script manifest to video.

Reads a YAML script manifest, validates the image path, prints the script,
then records the timeline over the image and writes the encoded video.
The script is always printed; the video path only when the host could
encode one.

Usage:
    # Render
    python -m reelcompose.cli \
        --manifest script.yaml --output /tmp/reel.webm

    # Landscape, lower frame rate
    python -m reelcompose.cli \
        --manifest script.yaml --output /tmp/reel.webm \
        --orientation landscape --fps 24

    # Validate only (no rendering)
    python -m reelcompose.cli --manifest script.yaml --validate
"""

import argparse
import dataclasses
import logging
import time

from .composer import compose
from .encoders import probe_duration
from .manifest import load_script_manifest, validate_paths
from .render import Orientation, format_countdown, geometry_for


def _print_script(config):
    """Print the segments, caption and hashtags."""
    timeline = config["timeline"]
    print(f"Script: {len(timeline)} segments, {timeline.total_duration:.1f}s")
    start = 0.0
    for i, segment in enumerate(timeline.segments):
        print(
            f"  {i}: [{format_countdown(start)}] {segment.title} "
            f"({segment.duration:.1f}s) — {segment.text}"
        )
        start += segment.duration
    if config["caption"]:
        print(f"\nCaption:\n{config['caption']}")
    if config["hashtags"]:
        print(f"\nHashtags: {' '.join(config['hashtags'])}")


def render(
    manifest_path: str,
    output_path: str,
    orientation: str | None = None,
    fps: int | None = None,
) -> str | None:
    """Load manifest, validate, print script, render and export video.

    Args:
        manifest_path: Path to YAML script manifest.
        output_path: Output video path.
        orientation: Overrides the manifest's orientation.
        fps: Overrides the manifest's frame rate.

    Returns:
        Path of the written video, or None if the host cannot encode.
    """
    config = load_script_manifest(manifest_path)
    validate_paths(config)

    settings = config["video"]
    if fps is not None:
        settings = dataclasses.replace(settings, fps=fps)
    orientation = orientation or config["orientation"]
    geometry = geometry_for(orientation)

    _print_script(config)

    print(f"\nResolution: {geometry.width}x{geometry.height}, {settings.fps}fps")
    print(f"Codec: {settings.codec} in {settings.container}")
    print(f"Recording {config['timeline'].total_duration:.1f}s in real time...")
    t0 = time.monotonic()
    artifact = compose(
        config["image"],
        config["timeline"],
        orientation,
        settings=settings,
        output=output_path,
        colors=config["colors"],
    )
    if artifact is None:
        print("\nVideo encoding is not available on this host — script only.")
        return None

    elapsed = time.monotonic() - t0
    try:
        duration = probe_duration(artifact.path)
        print(f"  Duration: {duration:.1f}s video, {elapsed:.1f}s wall")
    except OSError as e:
        print(f"  Could not read back video duration: {e}")
    print(f"\nDone: {artifact.path}")
    return str(artifact.path)


# ── CLI entry point ───────────────────────────────────────────────


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Render a timed script over an image to video.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML script manifest",
    )
    parser.add_argument(
        "--output",
        help="Output video path (e.g. reel.webm)",
    )
    parser.add_argument(
        "--orientation", choices=[o.value for o in Orientation], default=None,
        help="Override the manifest orientation",
    )
    parser.add_argument(
        "--fps", type=int, default=None,
        help="Override the manifest frame rate",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest only — check paths, don't render",
    )
    args = parser.parse_args(args)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.validate:
        config = load_script_manifest(args.manifest)
        validate_paths(config)
        print(
            f"Manifest valid: {len(config['timeline'])} segments, "
            f"{config['timeline'].total_duration:.1f}s"
        )
        for i, s in enumerate(config["timeline"].segments):
            print(f"  {i}: {s.id} — {s.title} ({s.duration:.1f}s)")
        print("Image path verified.")
        return

    if not args.output:
        parser.error("--output is required (unless using --validate)")

    if args.fps is not None and args.fps <= 0:
        parser.error("--fps must be positive")

    render(
        args.manifest, args.output,
        orientation=args.orientation,
        fps=args.fps,
    )


if __name__ == "__main__":
    main()
