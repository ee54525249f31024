#!/usr/bin/env python
"""
gifmoji CLI - Turn a still image into a looping spin or intensify GIF

Usage:
    gifmoji <input_image> [options]

Examples:
    gifmoji party.png                              # Clockwise spin
    gifmoji party.png --style intensify -i 3       # Shake it
    gifmoji party.png --blur-frames 4 --reverse    # Blurred reverse spin
    gifmoji party.png --preset spin_blur           # Use a preset
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .core.errors import GifmojiError
from .core.exporter import SpriteExporter
from .core.presets import get_preset_manager, load_config
from .core.session import GenerationSession
from .procedural import EffectConfig, Style, generate_sequence

# Argument dest -> EffectConfig.from_dict key
_OVERRIDES = {
    'style': 'style',
    'frames': 'num_frames',
    'delay': 'frame_delay_ms',
    'zoom': 'zoom',
    'blur_frames': 'blur_frames',
    'blur_amount': 'blur_amount',
    'blur_length': 'blur_length',
    'reverse': 'reverse',
    'intensity': 'intensity',
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gifmoji',
        description="Turn a still image into a looping animated GIF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Styles:
  spin       - One full rotation per loop (--reverse for counter-clockwise)
  intensify  - Seeded jitter around the centre (--intensity sets the amplitude)

Examples:
  %(prog)s emoji.png                          # Spin with defaults
  %(prog)s emoji.png --style intensify -i 3   # Shake
  %(prog)s emoji.png --blur-frames 4          # Motion-blurred spin
  %(prog)s emoji.png --format frames          # Write PNG frames instead
  %(prog)s --list-presets                     # Show all presets
        """
    )

    parser.add_argument(
        'input',
        type=str,
        nargs='?',  # Optional for --list-presets
        default=None,
        help='Input image (PNG, GIF, JPEG, ...)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output path (auto-generated if not specified)'
    )

    parser.add_argument(
        '--style',
        type=str,
        default=None,
        choices=[s.value for s in Style],
        help='Animation style (default: spin)'
    )

    parser.add_argument(
        '-f', '--frames',
        type=int,
        default=None,
        help='Number of animation frames (default: 8)'
    )

    parser.add_argument(
        '-d', '--delay',
        type=int,
        default=None,
        help='Frame delay in milliseconds (default: 50)'
    )

    parser.add_argument(
        '-z', '--zoom',
        type=float,
        default=None,
        help='Output scale factor (default: 1.0)'
    )

    parser.add_argument(
        '--blur-frames',
        type=int,
        default=None,
        help='Motion blur sub-frames per frame (default: 0)'
    )

    parser.add_argument(
        '--blur-amount',
        type=float,
        default=None,
        help='Opacity of the strongest blur sub-frame 0.0-1.0 (default: 0.5)'
    )

    parser.add_argument(
        '--blur-length',
        type=float,
        default=None,
        help='Fraction of the frame step the blur trail covers 0.0-1.0 (default: 0.5)'
    )

    parser.add_argument(
        '--reverse',
        action='store_true',
        default=None,
        help='Spin counter-clockwise (spin only)'
    )

    parser.add_argument(
        '-i', '--intensity',
        type=float,
        default=None,
        help='Shake amplitude in pixels (intensify only, default: 1.0)'
    )

    parser.add_argument(
        '--seed',
        type=float,
        default=None,
        help='Intensify seed for reproducible output'
    )

    parser.add_argument(
        '--format',
        type=str,
        default='gif',
        choices=['gif', 'frames'],
        help='Output format (default: gif)'
    )

    parser.add_argument(
        '--preset',
        type=str,
        default=None,
        metavar='NAME',
        help='Start from a preset (e.g., spin_blur, intensify)'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        metavar='PATH',
        help='Start from a YAML config file'
    )

    parser.add_argument(
        '--list-presets',
        action='store_true',
        help='List all available presets and exit'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='More logging (-v info, -vv debug)'
    )

    return parser


def resolve_config(args: argparse.Namespace) -> EffectConfig:
    """Layer preset, config file and explicit flags into one EffectConfig"""
    data = {}

    if args.preset:
        preset = get_preset_manager().get(args.preset)
        if preset is None:
            raise GifmojiError(f"Unknown preset: {args.preset}")
        data.update(preset.to_config().to_dict())

    if args.config:
        data.update(load_config(args.config).to_dict())

    for dest, key in _OVERRIDES.items():
        value = getattr(args, dest)
        if value is not None:
            data[key] = value

    return EffectConfig.from_dict(data)


def list_presets() -> None:
    manager = get_preset_manager()
    print("Available presets:")
    for name in manager.list_all():
        preset = manager.get(name)
        print(f"  {name:<20} [{preset.style}] {preset.description}")


async def _render(input_path: Path, config: EffectConfig, seed) -> bytes:
    session = GenerationSession()
    try:
        source = await session.load(input_path)
        output = await session.refresh(source, config, seed=seed)
        return output.data
    finally:
        session.close()


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    if args.list_presets:
        list_presets()
        return 0

    if args.input is None:
        parser.error("an input image is required")

    input_path = Path(args.input)

    try:
        config = resolve_config(args)

        if args.format == 'frames':
            from .core.parser import SourceParser

            output = Path(args.output or input_path.parent / f"{input_path.stem}_{config.style.value}")
            sequence = generate_sequence(SourceParser.parse(input_path), config, seed=args.seed)
            paths = SpriteExporter.to_frames(sequence, output)
            print(f"Wrote {len(paths)} frames to {output}")
            return 0

        output = Path(args.output or input_path.parent / f"{input_path.stem}_{config.style.value}.gif")
        data = asyncio.run(_render(input_path, config, args.seed))
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)
    except GifmojiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {output} ({config.num_frames} frames, {config.style.value})")
    return 0


if __name__ == '__main__':
    sys.exit(main())
