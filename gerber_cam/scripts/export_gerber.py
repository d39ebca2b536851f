#!/usr/bin/env python3
"""
Export Gerber Script.

Turn a plot job (YAML) into a Gerber RS-274X/X2 file.

Usage:
    python -m gerber_cam.scripts.export_gerber --file job.yaml --output top.gbr
    python -m gerber_cam.scripts.export_gerber --file job.yaml --dry-run
    gerber-export -f job.yaml -o top.gbr --config custom.yaml --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys

from gerber_cam.cam.generator import GerberError, GerberGenerator
from gerber_cam.configs.loader import ConfigError, load_config
from gerber_cam.utils import hashing
from gerber_cam.utils.logging_config import push_context, setup_logging
from gerber_cam.utils.validators import load_plot_job

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Export a plot job as a Gerber file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--file",
        "-f",
        type=str,
        required=True,
        help="Plot job file (YAML, schema plot_job.v1)",
    )
    output = parser.add_mutually_exclusive_group(required=True)
    output.add_argument(
        "--output",
        "-o",
        type=str,
        help="Destination Gerber file",
    )
    output.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the Gerber text instead of writing it",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Configuration file path",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )

    args = parser.parse_args(argv)

    # Load config
    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(
        args.log_level or config.logging.level,
        config.logging.file,
        json=config.logging.json,
        color=config.logging.color,
        context={"app": "export"},
    )

    try:
        job = load_plot_job(args.file)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Cannot load plot job: %s", e)
        return 1

    push_context(job=job.project.name)
    ops = job.to_operations()
    logger.info("Plot job contains %d operations", len(ops))

    gen = GerberGenerator(
        job.project.name, job.project.uuid, job.project.revision, config
    )
    try:
        gen.plot(ops)
        text = gen.generate()
        if args.dry_run:
            sys.stdout.write(text)
            return 0
        gen.save_to_file(args.output)
    except (GerberError, ValueError, RuntimeError):
        logger.exception("Export failed")
        return 1

    logger.info(
        "%d apertures, sha256=%s",
        len(gen.apertures),
        hashing.sha256_file(args.output),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
