"""Command-line interface for texture extraction."""

import argparse
import logging
import os
import sys

from .config import ExtractConfig
from .core import FORMAT_TABLE, FileSink, ManifestError, load_manifest, setup_logging

logger = logging.getLogger("texpack")


def _print_formats():
    for code, descriptor in sorted(FORMAT_TABLE.items()):
        print(f"{int(code):>4}  {descriptor.name:<12} {descriptor.family.value}")


def main():
    """Parse CLI arguments, extract every manifest record, and report failures."""
    parser = argparse.ArgumentParser(
        description="Repackage engine texture payloads as DDS files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  TexPack --manifest textures.csv --output ./extracted
  TexPack --config config.yaml
  TexPack -m textures.csv --dry-run
  TexPack -m textures.csv --verify --skip-unimplemented
  TexPack --generate-config
  TexPack --list-formats
        """
    )
    parser.add_argument("--manifest", "-m", help="CSV manifest of texture records")
    parser.add_argument("--output", "-o", help="Output directory")
    parser.add_argument("--config", "-c", help="Path to config YAML")
    parser.add_argument("--workers", type=int, help="Max parallel workers")
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("--verify", action="store_true",
                        help="Validate written DDS files")
    parser.add_argument("--skip-unimplemented", action="store_true",
                        help="Log PVR/ATC textures as skipped instead of failed")
    parser.add_argument("--generate-config", action="store_true",
                        help="Generate default config.yaml")
    parser.add_argument("--list-formats", action="store_true",
                        help="List known texture format codes and exit")
    parser.add_argument("--log-level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

    args = parser.parse_args()

    if args.list_formats:
        _print_formats()
        return

    if args.generate_config:
        config = ExtractConfig()
        dest = args.config or args.output or "config.yaml"
        if os.path.isdir(dest):
            dest = os.path.join(dest, "config.yaml")
        config.to_yaml(dest)
        logger.info("Generated default %s", dest)
        print(f"Generated default {dest}")
        return

    # Make config warnings visible before full logging is configured.
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.config:
        if not os.path.exists(args.config):
            logger.error("Config file not found: %s", args.config)
            print(f"Error: Config file not found: {args.config}")
            sys.exit(1)
        try:
            config = ExtractConfig.from_yaml(args.config)
        except ValueError as e:
            logger.error("Invalid config file '%s': %s", args.config, e)
            print(f"Error: Invalid config: {e}")
            sys.exit(1)
    else:
        config = ExtractConfig()

    # CLI overrides
    if args.manifest:
        config.manifest_path = args.manifest
    if args.output:
        config.output_dir = args.output
    if args.workers is not None:
        config.max_workers = args.workers
    if args.dry_run:
        config.dry_run = True
    if args.verify:
        config.validation.enabled = True
    if args.skip_unimplemented:
        config.extract.fail_on_unimplemented = False
    if args.log_level:
        config.log_level = args.log_level

    try:
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    if not config.manifest_path or not os.path.isfile(config.manifest_path):
        logger.error("Manifest not found: %s", config.manifest_path)
        print(f"Error: Manifest not found: {config.manifest_path}")
        sys.exit(1)

    setup_logging(config.log_level, config.log_file or None)

    try:
        records = load_manifest(config.manifest_path)
    except ManifestError as e:
        logger.error("Invalid manifest: %s", e)
        print(f"Error: Invalid manifest: {e}")
        sys.exit(1)

    from .extract import TextureExtractor
    sink = FileSink(config.output_dir, overwrite=config.extract.overwrite)
    extractor = TextureExtractor(config, sink)
    try:
        summary = extractor.run(records)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(130)

    if summary.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
