"""Command-line helper for invoking a single tool without an MCP client."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from hybrid_os.config import load_configs

from .router import build_router
from .tools import ALL_TOOLS, get_tool_by_name


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run one Epic/Steam tool and print its response text.")
    parser.add_argument("tool", nargs="?", help="Tool name (omit with --list to see all tools)")
    parser.add_argument("--args", dest="arguments", default="{}", help="Tool arguments as a JSON object")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config YAML.")
    parser.add_argument("--list", action="store_true", help="List available tools and exit.")
    parser.add_argument("--json", action="store_true", help="Print the full response envelope as JSON.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper()), format="[%(levelname)s] %(message)s")

    if args.list:
        for spec in ALL_TOOLS:
            print(f"{spec['name']}: {spec['description']}")
        return 0

    if not args.tool:
        parser.error("a tool name is required unless --list is given.")

    try:
        spec = get_tool_by_name(args.tool)
    except KeyError as exc:
        print(exc.args[0], file=sys.stderr)
        return 2

    try:
        arguments = json.loads(args.arguments)
    except ValueError as exc:
        parser.error(f"--args is not valid JSON: {exc}")
    if not isinstance(arguments, dict):
        parser.error("--args must be a JSON object.")
    missing = [key for key in spec["inputSchema"].get("required", []) if key not in arguments]
    if missing:
        parser.error(f"{args.tool} requires: {', '.join(missing)}")

    epic_cfg, steam_cfg, catalog_cfg = load_configs(args.config)
    router = build_router(epic_cfg, steam_cfg, catalog_cfg)

    result = router.run(args.tool, arguments)

    if args.json:
        print(json.dumps(result.to_envelope(), ensure_ascii=False, indent=2))
    else:
        print(result.text)
    return 0 if result.ok else 1


if __name__ == "__main__":  # pragma: no cover - manual entry point
    raise SystemExit(main())
