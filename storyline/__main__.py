"""Command-line entry point: rank an export, or serve the HTTP API."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from .config import PipelineConfig, load_config
from .orchestrator import FeedPipelineOrchestrator


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Normalize and rank stories and themes")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the YAML configuration file. Defaults to STORYLINE_CONFIG or built-in defaults.",
    )
    parser.add_argument("--input", type=Path, default=None, help="Override the input export path")
    parser.add_argument("--output", type=Path, default=None, help="Override the output feed path")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API instead of the pipeline")
    parser.add_argument("--quiet", action="store_true", help="Hide progress bars")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    config = PipelineConfig.from_yaml(args.config) if args.config else load_config()
    if args.input:
        config.input.path = args.input
    if args.output:
        config.output.path = args.output

    if args.serve:
        import uvicorn

        from .server import create_app

        logging.info("Starting API server on %s:%s", config.api_host, config.api_port)
        uvicorn.run(create_app(config), host=config.api_host, port=config.api_port)
        return

    results = FeedPipelineOrchestrator(config, show_progress=not args.quiet).run()
    if results:
        print(f"Wrote {len(results)} items ordered by relevance.")
    else:
        print("No stories or themes found in the export. Output file still created.")
    print(f"Output file: {config.output.path}")


if __name__ == "__main__":  # pragma: no cover
    main()
