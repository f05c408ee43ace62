"""Command line entry point."""

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from leettui import __version__
from leettui.application import AppContext, AppStateMachine
from leettui.config import CONFIG_DIR, Config, load_config
from leettui.domain.exceptions import ConfigError
from leettui.frontend import TerminalFrontend

LOG_FILENAME = "leettui.log"


def setup_logging(verbose: bool = False, log_dir: Path | None = None) -> Path:
    """Send logs to a rotating file, and to stderr when verbose."""
    log_path = (log_dir or CONFIG_DIR) / LOG_FILENAME
    logger.remove()
    logger.add(
        log_path,
        level="DEBUG" if verbose else "INFO",
        rotation="1 MB",
        retention=3,
        encoding="utf-8",
    )
    if verbose:
        logger.add(sys.stderr, level="DEBUG")
    return log_path


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="leettui", description="Terminal client for LeetCode")
    p.add_argument("--config", type=Path, default=None, help="Path to the config file")
    p.add_argument("--verbose", action="store_true", help="Also log debug output to stderr")
    p.add_argument("--version", action="version", version=f"leettui {__version__}")
    return p.parse_args(argv)


async def run_app(config: Config | None, config_path: Path | None = None) -> Path | None:
    """Run the interactive session. Returns the last opened problem directory."""
    context = AppContext.create(config) if config is not None else None
    machine = AppStateMachine(context)
    frontend = TerminalFrontend(machine, config_path)
    try:
        await frontend.run()
    finally:
        await machine.shutdown()
    return machine.view.last_opened_dir


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.verbose)
    logger.info(f"leettui {__version__} starting")

    try:
        config = load_config(args.config)
        last_dir = asyncio.run(run_app(config, args.config))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        print(f"leettui: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    if last_dir is not None:
        print(last_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
