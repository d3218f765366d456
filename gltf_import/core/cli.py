"""
CLI interface for gltf_import
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import load_settings
from .document import Gltf
from .importer import GltfImporter


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser"""
    parser = argparse.ArgumentParser(
        description="Resolve the buffers and images of a glTF 2.0 asset"
    )

    parser.add_argument(
        "input",
        help="Path to a .gltf or .glb file"
    )

    parser.add_argument(
        "--base",
        help="Directory or http(s) URL for relative references (defaults to the file's directory)"
    )

    parser.add_argument(
        "--no-base",
        action="store_true",
        help="Import without a base directory (only embedded resources are allowed)"
    )

    parser.add_argument(
        "--config",
        help="YAML settings file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
        importer = GltfImporter(settings=settings)

        source = Path(args.input).expanduser().resolve()
        gltf = Gltf.open(str(source))
        if args.no_base:
            base = None
        else:
            base = args.base or source.parent

        model = importer.import_blocking(gltf, base=base)
    except Exception as exc:
        if args.verbose:
            raise
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Imported: {source}")
    print(f"Buffers: {len(model.buffers)}")
    for index, buffer in sorted(model.buffers.items()):
        print(f"  [{index}] {len(buffer)} bytes")
    print(f"Images: {len(model.images)}")
    for index, image in sorted(model.images.items()):
        print(f"  [{index}] {image}")


if __name__ == "__main__":
    main()
