"""CLI entry point: evaluate a JSON inputs file and print the snapshot.

Usage:
    python -m scalp_advisor inputs.json
    python -m scalp_advisor inputs.json --config advisor.yaml --verbose
    cat inputs.json | python -m scalp_advisor -

The inputs file holds already-fetched data:
    {"candles": [...], "benchmark_candles": [...], "trend_candles": [...],
     "benchmark_daily_candles": [...], "position": {...} | null,
     "sentiment": {"value": 55, "classification": "Neutral"}}
"""

import argparse
import logging
import sys
from pathlib import Path

import orjson
from pydantic import ValidationError

from scalp_advisor.config import load_advisor_config, resolve_settings
from scalp_advisor.models.snapshot import AdvisorInputs
from scalp_advisor.pipeline import Advisor

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="scalp_advisor",
        description="Score entries and holdability and print a recommendation",
    )
    parser.add_argument(
        "inputs",
        type=str,
        help="Path to the inputs JSON file, or '-' for stdin",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to advisor.yaml (default: $ADVISOR_CONFIG_PATH or ./advisor.yaml)",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Print single-line JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def _read_inputs(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = resolve_settings(args.config)
    level = logging.DEBUG if args.verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        config = load_advisor_config(args.config)
    except ValueError as e:
        logger.error("Invalid advisor config: %s", e)
        return 2

    try:
        inputs = AdvisorInputs.model_validate(orjson.loads(_read_inputs(args.inputs)))
    except (OSError, orjson.JSONDecodeError, ValidationError) as e:
        logger.error("Invalid inputs: %s", e)
        return 2

    snapshot = Advisor(config).evaluate(inputs)

    option = 0 if args.compact else orjson.OPT_INDENT_2
    sys.stdout.write(orjson.dumps(snapshot.model_dump(mode="json"), option=option).decode())
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
