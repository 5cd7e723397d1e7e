#!/usr/bin/env python3
"""
Convert a PDF file into an editable Word document.

Usage:
    python -m converthub.run_convert INPUT.pdf [-o OUTPUT.docx] [--password P]
                                     [--detect-alignment] [--verbose]

Heuristic thresholds can be tuned through CONVERTHUB_* environment variables
or a .env file (see ConversionConfig.from_env).
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from converthub.config import ConversionConfig
from converthub.errors import ConversionError, describe_error
from converthub.pipeline import ConversionProgress, PdfToWordConverter

logger = logging.getLogger(__name__)


def default_output_path(input_path: Path) -> Path:
    """INPUT.pdf -> INPUT.docx next to the input."""
    return input_path.with_suffix(".docx")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a PDF into an editable DOCX document"
    )
    parser.add_argument(
        "pdf",
        help="Path to PDF file",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output .docx path (default: input path with .docx suffix)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password for encrypted PDFs",
    )
    parser.add_argument(
        "--detect-alignment",
        action="store_true",
        help="Detect centred and right-aligned paragraphs",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file with CONVERTHUB_* overrides",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)-5s %(name)s: %(message)s",
    )

    input_path = Path(args.pdf)
    output_path = Path(args.output) if args.output else default_output_path(input_path)

    overrides = {}
    if args.password is not None:
        overrides["password"] = args.password
    if args.detect_alignment:
        overrides["detect_alignment"] = True
    config = ConversionConfig.from_env(dotenv_path=args.env_file, **overrides)

    try:
        pdf_bytes = input_path.read_bytes()
    except OSError as e:
        print(f"Cannot read {input_path}: {e}", file=sys.stderr)
        return 1

    bar = tqdm(total=100, unit="%", disable=args.no_progress)

    def on_progress(progress: ConversionProgress) -> None:
        bar.set_description(progress.message)
        bar.update(progress.percent - bar.n)

    try:
        data = PdfToWordConverter(config).convert(
            pdf_bytes,
            filename=input_path.name,
            on_progress=on_progress,
        )
    except ConversionError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"\n{describe_error(e)}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Unexpected conversion failure: {e}", exc_info=args.verbose)
        print(f"\n{describe_error(e)}", file=sys.stderr)
        return 1
    finally:
        bar.close()

    try:
        output_path.write_bytes(data)
    except OSError as e:
        print(f"Cannot write {output_path}: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {output_path} ({len(data)} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
