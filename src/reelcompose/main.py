"""Subcommand dispatcher for reelcompose.

Usage:
    reelcompose script  --product ... --image ... --output script.yaml
    reelcompose render  --manifest script.yaml --output reel.webm
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="reelcompose",
        description="Timed script generation and script-over-image video rendering.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("script", help="Generate a script manifest from product fields")
    subparsers.add_parser("render", help="Render a script manifest to video")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "script":
        from .script_cli import main as script_main
        script_main(remaining)
    elif parsed.command == "render":
        from .cli import main as render_main
        render_main(remaining)


if __name__ == "__main__":
    main()
