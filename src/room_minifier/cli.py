"""Command-line interface for the room minifier.

This module provides the CLI entry point: one positional argument, the
input archive. The output is written next to it with `_compressed`
inserted before the extension.
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .core.recoder import humanize_size
from .registry import ContainerRegistry

OUTPUT_SUFFIX = "_compressed"


def output_path_for(input_path: Path) -> Path:
    """Derive the output path for an input archive.

    Example:
        >>> output_path_for(Path('rooms/session.zip'))
        PosixPath('rooms/session_compressed.zip')
    """
    return input_path.with_name(f"{input_path.stem}{OUTPUT_SUFFIX}{input_path.suffix}")


def _print_progress(stage: str, done: int, total: int) -> None:
    label = "Processing" if stage == "processing" else "Writing"
    print(f"\r{label}... {done}/{total} ", end="", file=sys.stderr, flush=True)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the minifier."""
    parser = argparse.ArgumentParser(
        prog="room-minifier",
        description="Shrink a tabletop room export by recoding its images to WebP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Writes session_compressed.zip next to the input
  room-minifier session.zip
        """,
    )

    parser.add_argument("input", help="Room export archive (.zip)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    input_path = Path(args.input)
    output_path = output_path_for(input_path)

    try:
        input_data = input_path.read_bytes()

        pipeline = ContainerRegistry.create_pipeline("zip", progress=_print_progress)
        result = pipeline.run(input_data)

        output_path.write_bytes(result.archive)
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

    ratio = result.output_size / result.input_size * 100 if result.input_size else 0
    print(
        f"\n{humanize_size(result.input_size)} -> {humanize_size(result.output_size)} "
        f"({ratio:.0f}%), {len(result.rename_map)} images recoded",
        file=sys.stderr,
    )
    print(f"Done: {output_path}", file=sys.stderr)


if __name__ == "__main__":
    main()
