"""
Command-line interface for vpacker.
"""
import argparse
import os
import sys
import time

from pydantic import ValidationError

from vpacker.config.loader import load_config
from vpacker.config.schema import ArchiveConfig
from vpacker.engines.packer import PackEngine
from vpacker.exceptions import VPackError
from vpacker.tree.scanner import format_tree
from vpacker.utils.logging import configure_logging


def _absolute(path, workdir):
    if path and not os.path.isabs(path):
        return os.path.join(workdir, path)
    return path


def main(argv=None):
    parser = argparse.ArgumentParser(description="vpacker: pack <input>/data/* into VP archives")
    parser.add_argument("input_dir", help="Input root; must contain a 'data' directory")
    parser.add_argument("--config", "-c", default=None, help="Path to configuration YAML/JSON file")
    parser.add_argument("--output-dir", "-o", default=None,
                        help="Directory to write archives and logs (defaults to current working directory)")
    parser.add_argument("--max-size", type=int, default=None,
                        help="Maximum payload bytes per archive (overrides archive.max_payload_bytes)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose (DEBUG) console output")
    parser.add_argument("--progress", "-p", action="store_true", help="Show byte progress bars while writing")
    parser.add_argument("--show-tree", action="store_true", help="Print the scanned tree of every unit")
    parser.add_argument("--dry-run", action="store_true", help="Plan archives without writing them")
    args = parser.parse_args(argv)

    workdir = os.path.abspath(args.output_dir) if args.output_dir else os.getcwd()
    try:
        config = load_config(args.config)
        if args.max_size is not None:
            config.archive = ArchiveConfig.model_validate(
                {**config.archive.model_dump(), "max_payload_bytes": args.max_size}
            )
    except (OSError, ValueError, ValidationError) as e:
        parser.error(f"invalid configuration: {e}")

    config.logging.file = _absolute(config.logging.file, workdir)
    config.logging.debug_file = _absolute(config.logging.debug_file, workdir)
    output_dir = _absolute(config.output.directory, workdir)
    os.makedirs(workdir, exist_ok=True)

    logger = configure_logging(config.logging, verbose=args.verbose)
    engine = PackEngine(config, args.input_dir, output_dir, logger=logger)

    start = time.time()
    try:
        if args.show_tree:
            for plan in engine.plans():
                print(format_tree(plan.node))
        if args.progress and not args.dry_run:
            from vpacker.utils.progress import ProgressManager
            with ProgressManager(engine.layers(), title=os.path.basename(os.path.abspath(args.input_dir))) as pm:
                written = engine.run(progress=pm)
        else:
            written = engine.run(dry_run=args.dry_run)
    except VPackError as e:
        logger.error(f"error: {e}")
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info(f"Wrote {len(written)} archive(s) in {time.time() - start:.2f}s")


if __name__ == "__main__":
    main()
