#!/usr/bin/env python3
"""
LE_ASCII Command Line Interface

Convert an image file, or an image generated from a text prompt, into a
character-mosaic rendering.

Usage:
    le-ascii convert photo.jpg -o out.png
    le-ascii generate "a lighthouse in a storm" --style blocks
    le-ascii --help
"""

import argparse
import json
import os
import sys

from PIL import UnidentifiedImageError

from .charsets import list_charsets
from .exporter import export_image
from .generator import GenerationError, create_generator, list_providers
from .pipeline import AsciiTransformer
from .settings import AsciiSettings, CONTRAST_CURVES


def build_settings(args) -> AsciiSettings:
    """Merge the optional settings file with explicit command line flags."""
    options = {}
    if args.settings:
        with open(args.settings, 'r', encoding='utf-8') as f:
            options.update(json.load(f))

    flags = {
        "resolution": args.resolution,
        "contrast": args.contrast,
        "brightness": args.brightness,
        "char_set_mode": args.style,
        "contrast_curve": args.contrast_curve,
    }
    options.update({key: value for key, value in flags.items() if value is not None})
    if args.invert:
        options["invert"] = True

    return AsciiSettings.from_mapping(options)


def write_outputs(result, args):
    """Write whichever outputs were requested; default to a timestamped PNG."""
    if args.print:
        print(result.text)

    if args.text:
        result.save(args.text, format="txt")
        print(f"✅ Saved text to {args.text}")

    if args.html:
        result.save(args.html, format="html")
        print(f"✅ Saved HTML to {args.html}")

    if args.output or not (args.text or args.html or args.print):
        path = export_image(result.image, args.output)
        print(f"✅ Saved image to {path}")


def run_convert(args) -> int:
    settings = build_settings(args)
    transformer = AsciiTransformer(settings)

    print(f"🔄 Converting {args.image} ({settings.char_set_mode})...")
    result = transformer.convert(args.image)

    stats = result.get_stats()
    print(f"   Grid: {stats['width']}x{stats['height']}, {stats['painted_cells']} glyphs painted")

    write_outputs(result, args)
    return 0


def run_generate(args) -> int:
    settings = build_settings(args)
    generator = create_generator(args.provider)
    transformer = AsciiTransformer(settings, generator=generator)

    print(f"🎨 Generating source image for: '{args.prompt}'")
    result = transformer.from_prompt(args.prompt)

    if args.save_source and result.source_image is not None:
        os.makedirs(os.path.dirname(args.save_source) or ".", exist_ok=True)
        result.source_image.save(args.save_source)
        print(f"✅ Saved source image to {args.save_source}")

    stats = result.get_stats()
    print(f"   Grid: {stats['width']}x{stats['height']}, {stats['painted_cells']} glyphs painted")

    write_outputs(result, args)
    return 0


def add_common_arguments(parser):
    parser.add_argument(
        "--resolution", "-r",
        type=float,
        default=None,
        help="Detail (density) in [0.1, 1.0], higher = more columns (default: 0.7)"
    )
    parser.add_argument(
        "--contrast", "-c",
        type=float,
        default=None,
        help="Contrast in [0.5, 3.0] (default: 1.1)"
    )
    parser.add_argument(
        "--brightness", "-b",
        type=int,
        default=None,
        help="Brightness offset in [-100, 100] (default: 0)"
    )
    parser.add_argument(
        "--invert", "-i",
        action="store_true",
        help="Invert luminance"
    )
    parser.add_argument(
        "--style", "-s",
        choices=list_charsets(),
        default=None,
        help="Character ramp (default: detail)"
    )
    parser.add_argument(
        "--contrast-curve",
        choices=CONTRAST_CURVES,
        default=None,
        help="linear (default) or fast (legacy formula)"
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="JSON file with settings; flags override it"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="PNG output path (default: outputs/Le_02_<timestamp>.png)"
    )
    parser.add_argument(
        "--text",
        type=str,
        default=None,
        help="Also save the glyph grid as plain text"
    )
    parser.add_argument(
        "--html",
        type=str,
        default=None,
        help="Also save the glyph grid as an HTML page"
    )
    parser.add_argument(
        "--print", "-p",
        action="store_true",
        help="Print the glyph grid to the terminal"
    )


def create_argument_parser():
    parser = argparse.ArgumentParser(
        prog="le-ascii",
        description="Convert images into character-mosaic renderings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  le-ascii convert photo.jpg
    Render with default settings to outputs/Le_02_<timestamp>.png

  le-ascii convert photo.jpg -s blocks -r 0.4 --invert -o out.png
    Coarser block rendering, inverted

  le-ascii generate "a lighthouse in a storm" --provider huggingface
    Generate a source image first (needs HF_TOKEN or GEMINI_API_KEY)
"""
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert an image file")
    convert.add_argument("image", help="Path to the source image")
    add_common_arguments(convert)
    convert.set_defaults(func=run_convert)

    generate = subparsers.add_parser("generate", help="Generate a source image from a prompt and convert it")
    generate.add_argument("prompt", help="Text prompt for the source image")
    generate.add_argument(
        "--provider",
        choices=list_providers(),
        default="gemini",
        help="Image generation provider (default: gemini)"
    )
    generate.add_argument(
        "--save-source",
        type=str,
        default=None,
        help="Also save the generated source image"
    )
    add_common_arguments(generate)
    generate.set_defaults(func=run_generate)

    return parser


def main(argv=None) -> int:
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        return args.func(args)
    except GenerationError as e:
        print(f"❌ {e}")
    except UnidentifiedImageError as e:
        print(f"❌ Could not load image: {e}")
    except OSError as e:
        print(f"❌ Could not read {e.filename or 'input file'}: {e.strerror or e}")
    except ValueError as e:
        print(f"❌ Invalid settings: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
