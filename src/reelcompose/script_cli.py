"""CLI for script generation — product fields to a script manifest.

Usage:
    reelcompose script --network tiktok --product "Garrafa Térmica" \
        --benefits "mantém gelado, leve, sem vazamentos" \
        --image photo.jpg --output script.yaml
"""

import argparse

from .manifest import dump_script_manifest
from .script import SOCIAL_TEMPLATES, generate_script


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Generate a timed script manifest for a social network.",
    )
    parser.add_argument(
        "--network", choices=sorted(SOCIAL_TEMPLATES), default="instagram",
        help="Target network template (default: instagram)",
    )
    parser.add_argument("--product", required=True, help="Product name")
    parser.add_argument("--benefits", default="", help="Comma-separated benefits")
    parser.add_argument("--brand", default="", help="Brand name")
    parser.add_argument("--audience", default="", help="Target audience")
    parser.add_argument("--tone", default="", help="Tone override")
    parser.add_argument(
        "--image", required=True,
        help="Image path written into the manifest",
    )
    parser.add_argument("--output", required=True, help="Output manifest path")
    parsed = parser.parse_args(args)

    if not parsed.product.strip():
        parser.error("--product must not be empty")

    result = generate_script(
        parsed.network,
        product_name=parsed.product,
        benefits=parsed.benefits,
        brand=parsed.brand,
        audience=parsed.audience,
        tone=parsed.tone,
    )
    template = result["template"]
    timeline = result["timeline"]

    dump_script_manifest(
        parsed.output,
        timeline,
        image=parsed.image,
        orientation=template.orientation,
        caption=result["caption"],
        hashtags=result["hashtags"],
    )

    print(f"{template.label}: {len(timeline)} segments, {timeline.total_duration:.1f}s")
    for note in template.notes:
        print(f"  - {note}")
    print(f"Done: {parsed.output}")


if __name__ == "__main__":
    main()
