#!/usr/bin/env python3
"""Generate a demo product image and one script manifest per network.

Writes examples/demo/product.png plus examples/demo/<network>.yaml, so
every template can be rendered without real assets.

Usage:
    python examples/generate_demo_script.py
    # Then render:
    reelcompose render --manifest examples/demo/tiktok.yaml \
        --output examples/demo-renders/tiktok.webm
"""

from pathlib import Path

from PIL import Image, ImageDraw

from reelcompose.common import load_font
from reelcompose.manifest import dump_script_manifest
from reelcompose.script import SOCIAL_TEMPLATES, generate_script

OUTPUT_DIR = Path(__file__).resolve().parent / "demo"
IMAGE_SIZE = (600, 800)

PRODUCT = "Garrafa Térmica Pro"
BENEFITS = "mantém gelado por 24h, leve, sem vazamentos"
BRAND = "Acme"


def _make_product_image(path: Path) -> None:
    """Teal bottle silhouette on a warm background, labelled 'DEMO'."""
    img = Image.new("RGB", IMAGE_SIZE, (235, 200, 160))
    draw = ImageDraw.Draw(img)
    w, h = IMAGE_SIZE
    draw.rounded_rectangle(
        (w * 0.35, h * 0.15, w * 0.65, h * 0.9), radius=40, fill=(15, 118, 110),
    )
    draw.rectangle((w * 0.42, h * 0.08, w * 0.58, h * 0.16), fill=(40, 40, 40))
    font = load_font(48, bold=True)
    draw.text((w / 2, h * 0.55), "DEMO", fill=(255, 255, 255), font=font, anchor="mm")
    img.save(path)


def main():
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    image_path = OUTPUT_DIR / "product.png"
    _make_product_image(image_path)
    print(f"  {image_path.name}")

    for network in SOCIAL_TEMPLATES:
        result = generate_script(
            network, product_name=PRODUCT, benefits=BENEFITS, brand=BRAND,
        )
        out = OUTPUT_DIR / f"{network}.yaml"
        dump_script_manifest(
            out,
            result["timeline"],
            image=str(image_path),
            orientation=result["template"].orientation,
            caption=result["caption"],
            hashtags=result["hashtags"],
        )
        print(f"  {out.name} ({result['timeline'].total_duration:.1f}s)")

    print(f"\nDone. Files in {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
