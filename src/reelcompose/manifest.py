"""Script manifest loader.

A script manifest is the YAML hand-off between the script generator and
the composer: the timed segments, the image to render them over, and the
video settings.

Schema:
  paths:                       # optional ${name} variables
    assets: "/data/product"
  video:                       # optional, defaults shown
    orientation: portrait      # portrait | landscape
    fps: 30
    bitrate: 4000000
    codec: libvpx-vp9
    container: webm
  image: "${assets}/photo.jpg"
  colors:                      # optional palette overrides
    accent: "#22d3ee"
  caption: "..."               # optional
  hashtags: ["#shorts"]        # optional
  segments:
    - id: hook
      title: Abertura
      text: "..."
      duration: 6
"""

from pathlib import Path

import yaml

from .common import parse_hex_color, resolve_path_vars
from .encoders import VideoSettings
from .errors import InputError
from .render import DEFAULT_COLORS, parse_orientation
from .timeline import Timeline


VALID_VIDEO_KEYS = {"orientation", "fps", "bitrate", "codec", "container"}

DEFAULT_ORIENTATION = "portrait"


def load_script_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a script manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Resolve ${path} variables in the image path.
      3. Build VideoSettings and the orientation from the video block.
      4. Parse colors.* hex strings to RGB tuples.
      5. Validate segments and build the Timeline.

    Args:
        manifest_path: Path to the YAML manifest.

    Returns:
        Dict with keys: video (VideoSettings), orientation (Orientation),
        image (str), colors (dict), timeline (Timeline), caption (str or
        None), hashtags (list[str]).

    Raises:
        ValueError: Missing/invalid fields.
        FileNotFoundError: Missing manifest file.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError("Script manifest: top level must be a mapping")
    if "image" not in raw:
        raise ValueError("Script manifest: missing required 'image' field")
    if "segments" not in raw:
        raise ValueError("Script manifest: missing required 'segments' field")

    paths = raw.get("paths") or {}
    config = {"image": resolve_path_vars(str(raw["image"]), paths)}

    # Video settings.
    video = dict(raw.get("video") or {})
    unknown = set(video) - VALID_VIDEO_KEYS
    if unknown:
        raise ValueError(
            f"Script manifest: unknown video keys {sorted(unknown)}. "
            f"Valid: {sorted(VALID_VIDEO_KEYS)}"
        )
    config["orientation"] = parse_orientation(
        video.pop("orientation", DEFAULT_ORIENTATION)
    )
    config["video"] = VideoSettings(**video)

    # Colors: only known palette keys.
    colors = {}
    for key, value in (raw.get("colors") or {}).items():
        if key not in DEFAULT_COLORS:
            raise ValueError(
                f"Script manifest: unknown color '{key}'. "
                f"Valid: {sorted(DEFAULT_COLORS)}"
            )
        if isinstance(value, str):
            colors[key] = parse_hex_color(value)
        elif isinstance(value, list) and len(value) == 3:
            colors[key] = tuple(int(c) for c in value)
        else:
            raise ValueError(f"Script manifest: invalid color value for '{key}': {value!r}")
    config["colors"] = colors

    # Segments.
    segments = raw["segments"]
    if not isinstance(segments, list):
        raise ValueError("Script manifest: 'segments' must be a list")
    for i, segment in enumerate(segments):
        if not isinstance(segment, dict):
            raise ValueError(f"Segment {i}: must be a mapping")
    try:
        config["timeline"] = Timeline.from_dicts(segments)
    except InputError as exc:
        raise ValueError(f"Script manifest: {exc}") from exc

    config["caption"] = raw.get("caption")
    hashtags = raw.get("hashtags") or []
    if not isinstance(hashtags, list):
        raise ValueError("Script manifest: 'hashtags' must be a list")
    config["hashtags"] = [str(tag) for tag in hashtags]

    return config


def validate_paths(config: dict) -> None:
    """Check that the manifest's image exists on disk.

    Raises:
        FileNotFoundError: If the image file is missing.
    """
    if not Path(config["image"]).exists():
        raise FileNotFoundError(f"Image not found: {config['image']}")


def dump_script_manifest(
    manifest_path: str | Path,
    timeline: Timeline,
    image: str,
    orientation: str = DEFAULT_ORIENTATION,
    caption: str | None = None,
    hashtags: list[str] | None = None,
) -> None:
    """Write a script manifest that load_script_manifest() accepts."""
    data = {
        "video": {"orientation": str(parse_orientation(orientation).value)},
        "image": image,
    }
    if caption is not None:
        data["caption"] = caption
    if hashtags:
        data["hashtags"] = list(hashtags)
    data["segments"] = timeline.to_dicts()

    Path(manifest_path).parent.mkdir(parents=True, exist_ok=True)
    with open(manifest_path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
