from __future__ import annotations

"""Build a Hangul bitmap font from a jamo workspace.

Usage:
    python main.py [WORKSPACE] [--out-dir DIR] [--workers N] [--warn-no-match] [-v]

Reads WORKSPACE (default: the current directory) and writes out.hex,
out-complete-only.hex, out.zip and selection.json into the output directory.
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional, Sequence

from combinator.controllers import EmitSummary, SyllableEmitter
from combinator.domain.errors import CombinatorError
from combinator.services.sinks import open_output_sinks
from combinator.services.workspace import Workspace

logger = logging.getLogger("combinator")


def build_font(workspace: Workspace) -> EmitSummary:
    """Compose every syllable and write all outputs for a loaded workspace."""
    out_dir = workspace.out_dir
    logger.info("Writing outputs to %s", out_dir)
    with ExitStack() as stack:
        sinks = open_output_sinks(out_dir, stack, workspace.config.zip_source)
        return SyllableEmitter(workspace).emit(sinks)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compose a Hangul bitmap font from jamo sprite sheets.")
    parser.add_argument("workspace", nargs="?", default=".", help="Workspace directory (default: current directory).")
    parser.add_argument("--out-dir", default=None, help="Output directory relative to the workspace (overrides config.yaml).")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads (1 = serial; overrides config.yaml).")
    parser.add_argument(
        "--warn-no-match",
        action="store_true",
        default=None,
        help="Log every syllable slot that no rule resolves.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        workspace = Workspace.load(
            Path(args.workspace),
            out_dir=args.out_dir,
            workers=args.workers,
            warn_no_match=args.warn_no_match,
        )
        summary = build_font(workspace)
    except CombinatorError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("I/O failure: %s", e)
        return 1

    logger.info("Done: %d syllables, %d complete", summary.total, summary.complete)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
