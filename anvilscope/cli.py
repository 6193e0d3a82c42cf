"""
Command line entry point.

Usage:
    anvilscope r.0.0.mca
    anvilscope r.0.0.mca --chunk 3 7
    anvilscope r.0.0.mca --json
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from anvilscope import __version__
from anvilscope.config import DEFAULT_MAX_DECOMPRESSED_SIZE, ReaderConfig
from anvilscope.core.region import RegionFile
from anvilscope.errors import RegionFormatError
from anvilscope.formats.anvil import read_region_file


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='anvilscope',
        description='Inspect the chunks stored in a Minecraft region file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s r.0.0.mca               List every generated chunk
  %(prog)s r.0.0.mca --chunk 3 7   Show one chunk in detail
  %(prog)s r.0.0.mca --json        Dump all chunks as JSON
        """
    )

    parser.add_argument(
        'file',
        nargs='?',
        help='Region file to read'
    )

    parser.add_argument(
        '--chunk',
        nargs=2,
        type=int,
        metavar=('X', 'Z'),
        help='Print a single chunk, by region-local or world chunk coordinates'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the result as JSON'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Number of decode threads (default: chosen by the thread pool)'
    )

    parser.add_argument(
        '--max-size',
        type=int,
        default=DEFAULT_MAX_DECOMPRESSED_SIZE,
        help='Maximum decompressed size of one chunk in bytes'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        stream=sys.stderr,
    )


def print_region(region: RegionFile, as_json: bool = False):
    if as_json:
        payload = {
            'region': [region.region_x, region.region_z],
            'chunks': {str(i): chunk.to_dict() for i, chunk in region.iter_chunks()},
            'errors': {str(i): str(error) for i, error in region.errors.items()},
        }
        print(json.dumps(payload, indent=2))
        return

    for i, chunk in region.iter_chunks():
        x, z = RegionFile.local_coords(i)
        print(f"{i:4d} ({x:2d}, {z:2d})  {chunk.status:<20} "
              f"sections={len(chunk.sections)} data_version={chunk.data_version}")
    print(f"{region.chunk_count} chunks, {len(region.errors)} unreadable")


def print_chunk(region: RegionFile, x: int, z: int, as_json: bool = False) -> bool:
    chunk = region.get_chunk(x, z)
    if chunk is None:
        print(f"error: chunk ({x}, {z}) is not present in the region", file=sys.stderr)
        return False

    if as_json:
        print(json.dumps(chunk.to_dict(), indent=2))
        return True

    print(f"Chunk ({chunk.chunk_x}, {chunk.chunk_z})  status={chunk.status}  "
          f"data_version={chunk.data_version}  last_update={chunk.last_update}")
    for y in chunk.section_ys:
        section = chunk.get_section(y)
        blocks = ', '.join(block.name for block in section.block_states.palette)
        print(f"  section {y:4d}: {len(section.block_states.palette)} block states [{blocks}], "
              f"{len(section.biomes.palette)} biomes")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = parse_arguments(argv)

    if not args.file:
        print("error: a filename is required.", file=sys.stderr)
        return 1

    setup_logging(args.debug)

    try:
        config = ReaderConfig(max_workers=args.workers, max_decompressed_size=args.max_size)
        region = read_region_file(args.file, config)
    except (OSError, RegionFormatError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.chunk is not None:
        return 0 if print_chunk(region, args.chunk[0], args.chunk[1], args.json) else 1

    print_region(region, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
