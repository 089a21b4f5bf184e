"""Application entry point: wires services and launches the console."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from shark.config import get_config
from shark.context import AppContext
from shark.core.game_saves import GameSaveManager
from shark.core.mirror import FilesystemMirror
from shark.data.catalog import Catalog, CatalogError
from shark.i18n import set_language
from shark.logger import setup_logger
from shark.ui.console import Console


def create_context(data_dir: Path | None = None) -> AppContext:
    """Wire all services and return an AppContext."""
    config = get_config(data_dir)

    # Logger
    setup_logger(config.data_dir / "logs", level=config.log_level)

    # Data
    catalog = Catalog(config.database_path)

    # Core services
    mirror = FilesystemMirror()
    game_saves = GameSaveManager(catalog, mirror, config.backup_root)

    return AppContext(
        config=config,
        catalog=catalog,
        mirror=mirror,
        game_saves=game_saves,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="save-shark",
        description="Back up, restore and catalog game save files.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding config.json, the catalog database and backups",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Application entry point."""
    args = parse_args(argv)

    try:
        ctx = create_context(args.data_dir)
    except CatalogError as e:
        logger.error(f"Cannot open catalog: {e}")
        return 1

    # Initialize i18n from config
    set_language(ctx.config.language)

    logger.info(f"Catalog: {ctx.config.database_path}, backups: {ctx.config.backup_root}")
    try:
        return Console(ctx).run()
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user (Ctrl+C)")
        return 0
    finally:
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())
