# iconkit/cli/iconsys_builder.py
"""Build or modify an icon.sys save descriptor."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from iconkit.assets.defaults import DefaultFiles
from iconkit.assets.iconsys import (
    MAX_TITLE_CHARS,
    IconSys,
    IconSysColor,
    IconSysLightColor,
    IconSysLightVec,
)
from iconkit.cli import configure_logging
from iconkit.codec.iconsys import read_iconsys, write_iconsys
from iconkit.config import IconSysBuilderConfig
from iconkit.errors import IconKitError

logger = logging.getLogger(__name__)

_CORNERS = ("Upper Left", "Upper Right", "Lower Left", "Lower Right")


def _channel(value: str) -> int:
    channel = int(value)
    if channel < 0 or channel > 255:
        raise argparse.ArgumentTypeError("All color values must range between 0 and 255.")
    return channel


def parse_args(argv: Optional[List[str]] = None) -> IconSysBuilderConfig:
    parser = argparse.ArgumentParser(
        prog="iconsys-builder",
        description="Build or manipulate an icon.sys file.",
        epilog=(
            "If no input file is given, defaults are used for all values not "
            "set explicitly. All color and opacity values range over 0..255."
        ),
    )
    parser.add_argument("-f", "--input-file", type=Path, default=None,
                        help="Existing icon.sys file used as input")
    parser.add_argument("-o", "--output-file", type=Path, default=Path(DefaultFiles.ICONSYS),
                        help="Destination file (default: icon.sys)")
    parser.add_argument("-l", "--list-file", action="store_true",
                        help="List the file data before writing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    parser.add_argument("--set-title", default=None, help="Title string")
    parser.add_argument("--title-linebreak", type=int, default=None,
                        help="Character index of the title linebreak (1..32)")
    parser.add_argument("--set-icon", default=None,
                        help="Standard icon filename; also sets copy and delete icons "
                             "unless those are given explicitly")
    parser.add_argument("--set-copy-icon", default=None, help="Copy icon filename")
    parser.add_argument("--set-delete-icon", default=None, help="Delete icon filename")
    parser.add_argument("--set-opacity", type=_channel, default=None, help="Background opacity")

    for n in (1, 2, 3):
        parser.add_argument(f"--light-{n}", type=float, nargs=4, default=None,
                            metavar=("X", "Y", "Z", "W"), help=f"Direction of light {n}")
    for n in ("1", "2", "3", "a"):
        parser.add_argument(f"--lcolor-{n}", type=_channel, nargs=4, default=None,
                            metavar=("R", "G", "B", "X"),
                            help="Ambient light color" if n == "a" else f"Color of light {n}")
    for n, corner in enumerate(_CORNERS, 1):
        parser.add_argument(f"--color-{n}", type=_channel, nargs=4, default=None,
                            metavar=("R", "G", "B", "X"),
                            help=f"Background color, {corner.lower()} corner")

    args = parser.parse_args(argv)

    if args.title_linebreak is not None and not 0 < args.title_linebreak <= MAX_TITLE_CHARS:
        parser.error("Invalid title linebreak.")
    if args.set_title is not None and len(args.set_title) > MAX_TITLE_CHARS:
        parser.error("Title string exceeds character limit.")

    def opt(values):
        return tuple(values) if values is not None else None

    return IconSysBuilderConfig(
        input_file=args.input_file,
        output_file=args.output_file,
        title=args.set_title,
        linebreak=args.title_linebreak,
        icon=args.set_icon,
        copy_icon=args.set_copy_icon,
        delete_icon=args.set_delete_icon,
        opacity=args.set_opacity,
        light_dirs=tuple(opt(getattr(args, f"light_{n}")) for n in (1, 2, 3)),
        light_colors=tuple(opt(getattr(args, f"lcolor_{n}")) for n in (1, 2, 3)),
        ambient_color=opt(args.lcolor_a),
        background=tuple(opt(getattr(args, f"color_{n}")) for n in (1, 2, 3, 4)),
        list_file=args.list_file,
        verbose=args.verbose,
    )


def _light_color(channels) -> IconSysLightColor:
    return IconSysLightColor(*(c / 255.0 for c in channels))


def apply_config(record: IconSys, config: IconSysBuilderConfig) -> None:
    """Apply every setting present in ``config`` to ``record``."""
    if config.title is not None:
        record.set_title(config.title)
    if config.linebreak is not None:
        record.set_linebreak(config.linebreak)

    if config.icon is not None:
        record.set_icon_file(config.icon)
        record.set_icon_copy_file(config.icon)
        record.set_icon_delete_file(config.icon)
    if config.copy_icon is not None:
        record.set_icon_copy_file(config.copy_icon)
    if config.delete_icon is not None:
        record.set_icon_delete_file(config.delete_icon)

    if config.opacity is not None:
        record.set_background_opacity(config.opacity)

    for i, direction in enumerate(config.light_dirs):
        if direction is not None:
            record.light_dirs[i] = IconSysLightVec(*direction)
    for i, channels in enumerate(config.light_colors):
        if channels is not None:
            record.light_colors[i] = _light_color(channels)
    if config.ambient_color is not None:
        record.ambient = _light_color(config.ambient_color)
    for i, channels in enumerate(config.background):
        if channels is not None:
            record.background[i] = IconSysColor(*channels)


def _hex_channels(color) -> str:
    return ", ".join(f"0x{c:02x}" for c in (color.r8, color.g8, color.b8, color.x8))


def list_record(record: IconSys) -> None:
    logger.info(" * Listing file... ")
    logger.info(" ** Title  \"%s\"", record.title_single_line)
    logger.info(" ** Icon         \"%s\"", record.icon_file)
    logger.info(" ** Icon Copy    \"%s\"", record.icon_copy_file)
    logger.info(" ** Icon Delete  \"%s\"", record.icon_delete_file)
    logger.info(" ** Background Opacity: 0x%02x", record.background_opacity)

    logger.info(" ** Background Colors  (R, G, B, X)")
    for corner, color in zip(_CORNERS, record.background):
        logger.info(" **  %-13s %s", corner + ":", _hex_channels(color))

    logger.info(" ** Light Sources  (X, Y, Z, W)")
    for n, vec in enumerate(record.light_dirs, 1):
        logger.info(" **  #%d: %s", n, ", ".join(f"{c:6g}" for c in vec.as_tuple()))

    logger.info(" ** Light Colors  (R, G, B, X)")
    for n, light in enumerate(record.light_colors, 1):
        logger.info(" ** #%d: %s", n, _hex_channels(light))
    logger.info(" ** Ambient: %s", _hex_channels(record.ambient))


def run(config: IconSysBuilderConfig) -> int:
    try:
        if config.input_file is not None:
            logger.debug(" * Reading \"%s\"", config.input_file)
            record = read_iconsys(config.input_file)
            if not record.is_valid():
                logger.debug(" * \"%s\" has non-standard reserved fields", config.input_file)
        else:
            record = IconSys()

        apply_config(record, config)

        if config.list_file:
            list_record(record)

        logger.debug(" * Writing output to \"%s\"", config.output_file)
        write_iconsys(record, config.output_file)
    except IconKitError as e:
        logger.error("%s", e)
        return 1

    logger.info("Success :)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    config = parse_args(argv)
    configure_logging(config.verbose)
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
