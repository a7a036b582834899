#!/usr/bin/env python3
"""Main entry point for the Epic & Steam hybrid MCP server."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from hybrid_os.config import load_configs
from hybrid_server import build_router, serve


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application.

    Log records go to stderr; stdout carries the MCP protocol stream.

    Args:
        level: Logging level (default: INFO)

    Returns:
        Root logger instance
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    return logging.getLogger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve Epic Games Launcher and Steam tools over MCP (stdio).")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config YAML.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logger = setup_logging(level=getattr(logging, args.log_level.upper()))

    if not args.config.exists():
        logger.info("%s not found; using defaults", args.config)

    try:
        epic_cfg, steam_cfg, catalog_cfg = load_configs(args.config)
    except Exception as exc:
        logger.error("Failed to load configuration: %s", exc)
        return 1

    logger.info("Configuration loaded")
    logger.info("  Epic manifests: %s", epic_cfg.manifest_dir)
    logger.info("  Steam libraries: %s", ", ".join(steam_cfg.library_paths) or "(none)")
    logger.info("  Catalog: %s (%s/%s)", catalog_cfg.url, catalog_cfg.locale, catalog_cfg.country)

    router = build_router(epic_cfg, steam_cfg, catalog_cfg, logger=logging.getLogger("hybrid_server"))

    try:
        logger.info("Epic & Steam hybrid MCP server running on stdio")
        asyncio.run(serve(router))
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as exc:
        logger.exception("Fatal error: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
