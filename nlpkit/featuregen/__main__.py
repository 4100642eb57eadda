"""
Command-line inspection of feature generator descriptors.

Usage:
    python -m nlpkit.featuregen namefinder.xml
    python -m nlpkit.featuregen namefinder.xml --serializers
    python -m nlpkit.featuregen --list-factories
"""

import argparse
import sys

from nlpkit.featuregen import (
    GeneratorFactoryError,
    extract_artifact_serializer_mappings,
    get_available_factories,
    get_descriptor_elements,
    load_factory_plugins,
)
from nlpkit.logging_config import close_debug_log, error


def _print_elements(descriptor_path: str) -> None:
    with open(descriptor_path, 'rb') as descriptor:
        elements = get_descriptor_elements(descriptor)

    for element in elements:
        label = element.class_name or element.name or ""
        value = f" = {element.text.strip()}" if element.text and element.text.strip() else ""
        print(f"<{element.tag}> {label}{value}".rstrip())
    print(f"\n{len(elements)} elements")


def _print_serializers(descriptor_path: str) -> None:
    with open(descriptor_path, 'rb') as descriptor:
        mapping = extract_artifact_serializer_mappings(descriptor)

    for key in sorted(mapping):
        print(f"{key}\t{type(mapping[key]).__name__}")
    print(f"\n{len(mapping)} serializers")


def main(argv: list[str] | None = None) -> int:
    """Command-line interface for descriptor inspection."""
    parser = argparse.ArgumentParser(
        prog="python -m nlpkit.featuregen",
        description="Inspect nlpkit feature generator descriptors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List every element of a descriptor
  python -m nlpkit.featuregen namefinder.xml

  # Show which resources need which serializer
  python -m nlpkit.featuregen namefinder.xml --serializers

  # Debug mode (verbose logging)
  NLPKIT_DEBUG=true python -m nlpkit.featuregen namefinder.xml
        """
    )

    parser.add_argument(
        'descriptor',
        nargs='?',
        help='Descriptor XML file to inspect'
    )

    parser.add_argument(
        '--serializers',
        action='store_true',
        help='Print the artifact serializer mapping instead of the elements'
    )

    parser.add_argument(
        '--list-factories',
        action='store_true',
        help='Print the registered factory names'
    )

    args = parser.parse_args(argv)

    try:
        return _run(parser, args)
    finally:
        close_debug_log()


def _run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    load_factory_plugins()

    if args.list_factories:
        for name in get_available_factories():
            print(name)
        return 0

    if not args.descriptor:
        parser.error("a descriptor file is required")

    try:
        if args.serializers:
            _print_serializers(args.descriptor)
        else:
            _print_elements(args.descriptor)
    except (GeneratorFactoryError, OSError) as e:
        error(f"[FEATUREGEN] Cannot inspect {args.descriptor}: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
