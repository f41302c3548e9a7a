"""
Main CLI application for building Visio stencils from image folders.
"""

import argparse
import sys

from dotenv import load_dotenv

from .config import load_settings
from .stencil_builder import StencilBuilder
from .stencil_inspector import StencilInspector
from .svg_converter import SvgConverter
from .visio_session import VisioSession


def _settings_from_args(args):
    return load_settings(
        args.config,
        max_dimension=args.max_dimension,
        connection_points_file=args.connection_points,
        convert_svg=True if args.convert_svg else None,
        converter=args.converter,
        png_dir=args.png_dir,
        stencil_template=args.template,
        overwrite=True if args.overwrite else None,
        visible=True if args.visible else None,
        label_case=args.label_case,
        label_position=args.label_position,
    )


def _print_report(report):
    print(f"      {len(report.masters)} masters saved to: {report.output}")


def convert_command(args):
    """Handle the convert subcommand (one folder -> one stencil)."""
    settings = _settings_from_args(args)
    mode = "scale only" if args.scale_only else "full"
    print(f"Building stencil from: {args.folder} ({mode})")

    with VisioSession(settings.prog_id, settings.visible) as session:
        builder = StencilBuilder(session, settings)
        report = builder.build(args.folder, args.output, scale_only=args.scale_only, append=args.append)

    _print_report(report)


def scale_command(args):
    """Handle the scale subcommand (import and rescale only)."""
    args.scale_only = True
    convert_command(args)


def batch_command(args):
    """Handle the batch subcommand (one stencil per subfolder)."""
    settings = _settings_from_args(args)
    print("=" * 60)
    print(f"VISIO STENCIL - Batch build from {args.root}")
    print("=" * 60)

    with VisioSession(settings.prog_id, settings.visible) as session:
        builder = StencilBuilder(session, settings)
        reports = builder.build_batch(args.root, args.output, scale_only=args.scale_only)

    for report in reports:
        _print_report(report)

    print("\n" + "=" * 60)
    print(f"✓ Built {len(reports)} stencils in: {args.output}")
    print("=" * 60)


def svg2png_command(args):
    """Handle the svg2png subcommand."""
    converter = SvgConverter(args.converter or "auto", args.width)
    print(f"Converting SVGs in {args.folder} with {converter.tool}")
    converted = converter.convert_folder(args.folder, args.output)
    print(f"Converted {len(converted)} files")


def inspect_command(args):
    """Handle the inspect subcommand."""
    inspector = StencilInspector(args.stencil)
    if args.output:
        inspector.to_json(args.output)
        print(f"Master list saved to: {args.output}")
        return

    masters = inspector.list_masters()
    print(f"Found {len(masters)} masters in {args.stencil}")
    for master in masters:
        points = ", ".join(master["connection_points"]) or "-"
        print(f"  [{master['id']}] {master['name']}: {points}")


def _add_build_options(parser):
    parser.add_argument('-c', '--config', help='YAML or JSON settings file')
    parser.add_argument('-p', '--connection-points', help='JSON file with connection point definitions')
    parser.add_argument('--max-dimension', type=float, help='Longest side of each master in inches (default: 1.0)')
    parser.add_argument('--convert-svg', action='store_true', help='Rasterize SVGs to PNG before importing')
    parser.add_argument('--converter', choices=['auto', 'inkscape', 'rsvg-convert'], help='SVG converter to use')
    parser.add_argument('--png-dir', help='Directory for converted PNGs (default: <folder>/png)')
    parser.add_argument('--label-case', choices=['title', 'upper', 'lower', 'none'], help='Casing of master names')
    parser.add_argument('--label-position', choices=['below', 'above', 'center'], help='Label placement')
    parser.add_argument('--template', help='Blank .vssx used to create new stencils')
    parser.add_argument('--overwrite', action='store_true', help='Replace existing output files')
    parser.add_argument('--visible', action='store_true', help='Show the Visio window while working')


def main():
    """Main entry point for the CLI."""
    # Load environment variables from .env file
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Build Visio stencils (.vssx) from folders of SVG/PNG images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One folder -> one stencil
  %(prog)s convert icons/ -o icons.vssx -p points.json

  # One stencil per subfolder
  %(prog)s batch icon_sets/ -o stencils/ -p points.json --overwrite

  # Rescale only, no connection points or label styling
  %(prog)s scale icons/ -o icons.vssx

  # Helpers
  %(prog)s svg2png icons/ -o icons/png
  %(prog)s inspect icons.vssx
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Convert command
    convert_parser = subparsers.add_parser('convert', help='Build one stencil from a folder of images')
    convert_parser.add_argument('folder', help='Folder with SVG/PNG images')
    convert_parser.add_argument('-o', '--output', required=True, help='Output .vssx file')
    convert_parser.add_argument('--append', action='store_true', help='Add masters to an existing stencil')
    convert_parser.add_argument('--scale-only', action='store_true', help='Skip connection points and labels')
    _add_build_options(convert_parser)
    convert_parser.set_defaults(func=convert_command)

    # Batch command
    batch_parser = subparsers.add_parser('batch', help='Build one stencil per subfolder')
    batch_parser.add_argument('root', help='Folder whose subfolders hold images')
    batch_parser.add_argument('-o', '--output', required=True, help='Output directory for .vssx files')
    batch_parser.add_argument('--scale-only', action='store_true', help='Skip connection points and labels')
    _add_build_options(batch_parser)
    batch_parser.set_defaults(func=batch_command)

    # Scale command
    scale_parser = subparsers.add_parser('scale', help='Build a stencil of rescaled images only')
    scale_parser.add_argument('folder', help='Folder with SVG/PNG images')
    scale_parser.add_argument('-o', '--output', required=True, help='Output .vssx file')
    scale_parser.add_argument('--append', action='store_true', help='Add masters to an existing stencil')
    _add_build_options(scale_parser)
    scale_parser.set_defaults(func=scale_command)

    # SVG to PNG command
    svg_parser = subparsers.add_parser('svg2png', help='Convert SVG files to PNG')
    svg_parser.add_argument('folder', help='Folder with SVG files')
    svg_parser.add_argument('-o', '--output', help='Output directory (default: <folder>/png)')
    svg_parser.add_argument('-w', '--width', type=int, default=256, help='PNG width in pixels (default: 256)')
    svg_parser.add_argument('--converter', choices=['auto', 'inkscape', 'rsvg-convert'], help='SVG converter to use')
    svg_parser.set_defaults(func=svg2png_command)

    # Inspect command
    inspect_parser = subparsers.add_parser('inspect', help='List masters and connection points of a stencil')
    inspect_parser.add_argument('stencil', help='Input .vssx file')
    inspect_parser.add_argument('-o', '--output', help='Write the master list to a JSON file')
    inspect_parser.set_defaults(func=inspect_command)

    # Parse arguments
    args = parser.parse_args()

    # Execute command
    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except Exception as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
