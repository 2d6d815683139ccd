"""
Command line entry point for the collage toolkit.

    collage-toolkit [--config FILE] [-v] collage --columns 2 --mime-type image/jpeg \
        --output-folder out --filename collage.jpg --base-url https://cdn a.jpg:landscape b.jpg
    collage-toolkit pdf --output-folder out --filename doc.pdf scan.pdf:2 photo.jpg:1:portrait
    collage-toolkit resize --output-folder out --width 800 a.jpg b.png

Results are printed as JSON. Exit codes: 0 success (including "nothing
produced", printed as null), 1 resource/processing failure, 2 bad input.
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from collage_toolkit import __version__
from collage_toolkit.config import load_engine_config
from collage_toolkit.controller import MediaEngine
from collage_toolkit.core.models import (
    CollageImage,
    CollageSettings,
    DocumentInput,
    HostedFile,
    OrientationTag,
    PdfSettings,
)
from collage_toolkit.errors import CompositionError, ContractViolationError

logger = logging.getLogger(__name__)


def _split_orientation(spec: str) -> Tuple[str, OrientationTag]:
    """Peel a trailing ':orientation' off spec, if there is one."""
    head, sep, tail = spec.rpartition(":")
    if not sep:
        return spec, OrientationTag.NOT_APPLICABLE
    if not tail.strip():
        return head, OrientationTag.NOT_APPLICABLE
    try:
        return head, OrientationTag.parse(tail)
    except ContractViolationError:
        # The colon belongs to the path, e.g. a Windows drive
        return spec, OrientationTag.NOT_APPLICABLE


def _parse_collage_image(spec: str) -> CollageImage:
    """'path[:orientation]' -> CollageImage. Drive letters are kept in path."""
    path, orientation = _split_orientation(spec)
    return CollageImage(path, orientation)


def _parse_document_input(spec: str) -> DocumentInput:
    """'path[:priority[:orientation]]' -> DocumentInput. Drive letters are kept in path."""
    rest, orientation = _split_orientation(spec)
    priority = 0
    head, sep, tail = rest.rpartition(":")
    if sep and re.fullmatch(r"-?\d+", tail.strip()):
        rest, priority = head, int(tail)
    elif sep and not tail:
        rest = head
    return DocumentInput(rest, sort_priority=priority, orientation=orientation)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collage-toolkit",
        description="Compose image collages and multi-page PDFs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="Engine config JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    collage = sub.add_parser("collage", help="Tile images into a grid")
    collage.add_argument("--columns", type=int, required=True)
    collage.add_argument("--mime-type", default="image/jpeg")
    collage.add_argument("--output-folder", required=True)
    collage.add_argument("--filename", required=True)
    collage.add_argument("--base-url", default="")
    collage.add_argument("images", nargs="*", help="path[:portrait|landscape|na]")

    pdf = sub.add_parser("pdf", help="Assemble images and PDFs into one PDF")
    pdf.add_argument("--output-folder", required=True)
    pdf.add_argument("--filename", required=True)
    pdf.add_argument("--base-url", default="")
    pdf.add_argument("--width", type=int, default=None, help="Page width in pixels")
    pdf.add_argument("files", nargs="*", help="path[:priority[:orientation]]")

    resize = sub.add_parser("resize", help="Write resized copies of images")
    resize.add_argument("--output-folder", required=True)
    resize.add_argument("--base-url", default="")
    resize.add_argument("--width", type=int, default=None)
    resize.add_argument("files", nargs="*")

    return parser


def _run(args: argparse.Namespace) -> object:
    engine = MediaEngine(load_engine_config(args.config))

    if args.command == "collage":
        settings = CollageSettings(
            columns=args.columns,
            mime_type=args.mime_type,
            filename=args.filename,
            output_folder=args.output_folder,
            base_url=args.base_url,
        )
        media = engine.create_collage([_parse_collage_image(s) for s in args.images], settings)
        return media.to_dict() if media else None

    if args.command == "pdf":
        settings = PdfSettings(
            filename=args.filename,
            output_folder=args.output_folder,
            base_url=args.base_url,
            resize_document_width=args.width,
        )
        media = engine.create_pdf([_parse_document_input(s) for s in args.files], settings)
        return media.to_dict() if media else None

    files = engine.resize_media_files(
        [HostedFile(f) for f in args.files],
        args.output_folder,
        args.base_url,
        args.width,
    )
    return [{"filename": f.filename, "url": f.url} for f in files]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        result = _run(args)
    except ContractViolationError as e:
        logger.error(f"Invalid input: {e}")
        return 2
    except CompositionError as e:
        logger.error(f"Composition failed: {e}")
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
