#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from indexsync.adapters.cluster import TemplateApi
from indexsync.app import run_reconciliation
from indexsync.common.logging import configure_logging
from indexsync.config import ConfigurationError, get_cluster_config, get_pass_config
from indexsync.domain.reconciliation import ReconcileOptions

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile search cluster indices and templates with declared JSON files"
    )
    parser.add_argument(
        "--root",
        type=Path,
        help="Declaration directory (default: INDEXSYNC_ROOT or ./es)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Delete and recreate existing indices and overwrite templates (removes all data)",
    )
    parser.add_argument(
        "--relevant-setting",
        action="append",
        dest="relevant_settings",
        metavar="KEY",
        help="Dotted setting key compared during drift detection; repeatable",
    )
    parser.add_argument(
        "--legacy-templates",
        action="store_true",
        help="Use the legacy _template API instead of _index_template",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the next entity after a failure",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        args = _parse_args(sys.argv[1:] if argv is None else argv)
        pass_config = get_pass_config()
        cluster_config = get_cluster_config()
        options = ReconcileOptions(
            force=args.force or pass_config.options.force,
            relevant_settings=tuple(
                args.relevant_settings or pass_config.options.relevant_settings
            ),
        )
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    template_api = TemplateApi.LEGACY if args.legacy_templates else None

    try:
        summary = run_reconciliation(
            args.root or pass_config.root,
            options=options,
            fail_fast=pass_config.fail_fast and not args.keep_going,
            template_api=template_api,
            cluster_config=cluster_config,
        )
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not summary.ok:
        for failure in summary.failures:
            print(f"Failed {failure.kind} [{failure.name}]: {failure.error}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def cli() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()
