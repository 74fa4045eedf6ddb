"""Command-line interface for bayer_dither.

Reads an image from a file, URL or stdin, dithers it, and writes the result to
a file or as PNG to stdout. ``--json`` switches reporting to structured
documents for scripting; ``--tui`` opens the interactive preview instead.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from bayer_dither.core.color import ColorPolicy
from bayer_dither.core.matrix import MATRIX_SIZES
from bayer_dither.core.order import PreserveOrder, as_preserve_order
from bayer_dither.version import __version__


def parse_matrix_size(token: str) -> int:
    """Turn "m2"/"M4"/"8" into an int; range checking is left to the engine."""
    text = token.strip().lower()
    if text.startswith("m"):
        text = text[1:]
    try:
        return int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(
            "Invalid Bayer matrix option. Choose from: m2, m4, m8."
        ) from None


def parse_preserve_order(token: str) -> PreserveOrder:
    try:
        mode = as_preserve_order(token)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None
    if mode == PreserveOrder.NONE:
        raise argparse.ArgumentTypeError(
            "Invalid preserve order option. Choose from: dark, light."
        )
    return mode


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bayer-dither",
        description="Apply ordered (Bayer matrix) dithering to an image.",
    )
    parser.add_argument(
        "-i", "--input",
        metavar="INPUT_IMG",
        help="Input image path or URL. Reads stdin when omitted.",
    )
    parser.add_argument(
        "-o", "--output",
        metavar="OUTPUT_IMG",
        help="Output image path. Writes PNG to stdout when omitted.",
    )
    parser.add_argument(
        "-m", "--matrix-size",
        metavar="MATRIX_SIZE",
        type=parse_matrix_size,
        required=True,
        help="Bayer matrix: m2, m4 or m8.",
    )
    parser.add_argument(
        "-c", "--color",
        action="store_true",
        help="Preserve colors using brightness channel dithering.",
    )
    parser.add_argument(
        "-p", "--preserve-order",
        metavar="PRESERVE_ORDER",
        type=parse_preserve_order,
        default=None,
        help="Preserve order in 'dark' or 'light' pixels.",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in ColorPolicy],
        default=ColorPolicy.HUE.value,
        help="How light/dark levels are rendered in color mode (default: hue).",
    )
    parser.add_argument(
        "--mask",
        action="store_true",
        help="Keep original colors and write the pattern to the alpha channel "
        "(implies --color).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (requires -o).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error.",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Open the interactive preview on the input image.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _fail(message: str, code: str, as_json: bool) -> None:
    """Report an error on stderr (plain or JSON) and exit with code 1."""
    if as_json:
        err = {"status": "error", "error": message, "code": code}
        print(json.dumps(err), file=sys.stderr)
    else:
        print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _settings_from_args(args: argparse.Namespace):
    from bayer_dither.core.processor import DitherSettings

    return DitherSettings(
        matrix_size=args.matrix_size,
        color=args.color or args.mask,
        preserve=args.preserve_order or PreserveOrder.NONE,
        policy=ColorPolicy(args.policy),
        mask=args.mask,
    )


def _run(args: argparse.Namespace) -> None:
    """Run the headless read → dither → write pipeline."""
    from bayer_dither.core.errors import InvalidMatrixSize, InvalidPixelFormat
    from bayer_dither.core.processor import process_image
    from bayer_dither.core.reader import is_url, read_image
    from bayer_dither.core.writer import save_image, write_png

    is_json = args.json
    if is_json and not args.output:
        _fail("--json requires an output path (-o)", "INVALID_INPUT", True)

    settings = _settings_from_args(args)

    raw_input = args.input
    is_remote = raw_input is not None and is_url(raw_input)
    if is_remote and not is_json:
        print(f"Downloading {raw_input}...", file=sys.stderr)

    try:
        source = read_image(raw_input)
    except FileNotFoundError as e:
        _fail(str(e), "FILE_NOT_FOUND", is_json)
    except (ValueError, OSError) as e:
        code = "DOWNLOAD_FAILED" if is_remote else "INVALID_INPUT"
        _fail(str(e), code, is_json)

    info = source.info
    try:
        result = process_image(source.image, settings)
    except InvalidMatrixSize:
        _fail(
            "Invalid Bayer matrix option. Choose from: m2, m4, m8.",
            "INVALID_MATRIX_SIZE",
            is_json,
        )
    except InvalidPixelFormat as e:
        _fail(str(e), "INVALID_PIXEL_FORMAT", is_json)
    except Exception as e:
        if args.debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _fail(f"Error during processing: {e}", "PROCESSING_ERROR", is_json)

    try:
        if args.output:
            output_path = Path(args.output).resolve()
            save_image(result, output_path)
        else:
            write_png(result, sys.stdout.buffer)
    except (ValueError, OSError) as e:
        if args.debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _fail(str(e), "PROCESSING_ERROR", is_json)

    if not args.output:
        return
    if not is_json:
        print(f"Saved to {output_path}", file=sys.stderr)
        return

    report = {
        "status": "success",
        "input": info.source,
        "output": str(output_path),
        "settings": {
            "matrix_size": settings.matrix_size,
            "color": settings.color,
            "preserve_order": settings.preserve.value,
            "policy": settings.policy.value,
            "mask": settings.mask,
        },
        "metadata": {
            "width": info.width,
            "height": info.height,
            "input_format": info.format,
            "input_mode": info.mode,
            "output_mode": result.mode,
            "output_format": output_path.suffix.lstrip(".").lower(),
        },
    }
    print(json.dumps(report, indent=2))


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.tui:
        if not args.input:
            parser.error("--tui requires an input image (-i)")
        if args.matrix_size not in MATRIX_SIZES:
            parser.error("Invalid Bayer matrix option. Choose from: m2, m4, m8.")
        from bayer_dither.app import run_app

        run_app(input_path=args.input, settings=_settings_from_args(args))
        return

    _run(args)


if __name__ == "__main__":
    main()
