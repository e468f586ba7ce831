"""
bootstrap/entrypoints.py - Logging setup and CLI entry point

    rabcalc volume request.json [--final]
    rabcalc footplate request.json [--final]
    rabcalc beam request.json [--final]
    rabcalc wall request.json [--final]
    rabcalc plaster request.json [--final]
    rabcalc brick-coverage --pieces 6000 --length 230 --width 110 --height 50
    rabcalc tile-coverage --pieces 4 --width 60 --height 60
    rabcalc presets
"""

from __future__ import annotations
from typing import Any, Dict
import argparse
import json
import logging
import sys

logger = logging.getLogger("bootstrap.entrypoints")


DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: str = None,
    json_format: bool = False,
    format_string: str = DEFAULT_LOG_FORMAT,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
        format_string: Format for plain-text records
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:

        class JSONFormatter(logging.Formatter):
            def format(self, record):
                return json.dumps({
                    "timestamp": self.formatTime(record),
                    "level": record.levelname,
                    "logger": record.name,
                    "message": record.getMessage(),
                })

        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(format_string)

    # Console handler; stdout carries the JSON result
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)


def _read_request(path: str) -> Dict[str, Any]:
    if path == "-":
        return json.load(sys.stdin)
    with open(path) as f:
        return json.load(f)


def _print(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Construction cost estimation (HPP/RAB)",
        prog="rabcalc",
    )

    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (overrides config)",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )

    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("volume", "Single-stage volume/area/length job"),
        ("footplate", "Pad footing job (concrete, formwork, reinforcement)"),
        ("beam", "Beam job (concrete, formwork, bars and stirrups)"),
        ("wall", "Brick wall job over a wall area"),
        ("plaster", "Three-layer plaster job over an area"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("request", help="Request JSON file ('-' for stdin)")
        cmd.add_argument(
            "--final",
            action="store_true",
            help="Validate strictly before accepting the estimate",
        )

    brick = sub.add_parser("brick-coverage", help="Wall area covered by one brick package")
    brick.add_argument("--pieces", type=float, required=True, help="Bricks per package")
    brick.add_argument("--preset", default=None, help="Brick preset key (overrides dimensions)")
    brick.add_argument("--length", type=float, default=0.0, help="Brick length (mm)")
    brick.add_argument("--width", type=float, default=0.0, help="Brick width (mm)")
    brick.add_argument("--height", type=float, default=0.0, help="Brick height (mm)")
    brick.add_argument("--mortar", type=float, default=10.0, help="Mortar joint (mm)")
    brick.add_argument("--waste-percent", type=float, default=0.0, help="Waste (%%)")
    brick.add_argument("--double-wall", action="store_true", help="Double-thickness wall")
    brick.add_argument("--unit", default="truk", help="Package unit name")

    tile = sub.add_parser("tile-coverage", help="Floor area covered by one tile box")
    tile.add_argument("--pieces", type=float, required=True, help="Tiles per box")
    tile.add_argument("--width", type=float, required=True, help="Tile width (cm)")
    tile.add_argument("--height", type=float, required=True, help="Tile height (cm)")

    sub.add_parser("presets", help="List brick presets and conversion rules")

    return parser


def run_command(parsed: argparse.Namespace) -> Dict[str, Any]:
    """Execute a parsed CLI command and return its JSON payload."""
    from ..core.inputs import (
        BeamRequest,
        BrickCourse,
        FootplateRequest,
        PlasterRequest,
        SingleStageRequest,
        WallRequest,
    )
    from ..core.tables import get_tables
    from ..geometry import GeometryEngine
    from ..workflows import (
        BeamEstimator,
        FootplateEstimator,
        PlasterEstimator,
        SingleStageEstimator,
        WallEstimator,
    )

    jobs = {
        "volume": (SingleStageRequest, SingleStageEstimator),
        "footplate": (FootplateRequest, FootplateEstimator),
        "beam": (BeamRequest, BeamEstimator),
        "wall": (WallRequest, WallEstimator),
        "plaster": (PlasterRequest, PlasterEstimator),
    }
    if parsed.command in jobs:
        request_model, estimator_cls = jobs[parsed.command]
        request = request_model.model_validate(_read_request(parsed.request))
        return estimator_cls().estimate(request, final=parsed.final).to_dict()

    geometry = GeometryEngine()

    if parsed.command == "brick-coverage":
        waste = parsed.waste_percent / 100.0
        if parsed.preset:
            params = geometry.brick_from_preset(
                parsed.preset, parsed.pieces, waste, parsed.double_wall
            )
        else:
            params = BrickCourse(
                pieces_per_package=parsed.pieces,
                brick_length_mm=parsed.length,
                brick_width_mm=parsed.width,
                brick_height_mm=parsed.height,
                mortar_thickness_mm=parsed.mortar,
                waste_fraction=waste,
                double_wall=parsed.double_wall,
            )
        return geometry.compute_brick_coverage(params, parsed.unit).to_dict()

    if parsed.command == "tile-coverage":
        return geometry.compute_tile_coverage(parsed.pieces, parsed.width, parsed.height).to_dict()

    if parsed.command == "presets":
        tables = get_tables()
        return {
            "brick_presets": [p.to_dict() for p in tables.brick_presets.values()],
            "conversions": tables.conversions.to_list(),
            "concrete_grades": list(tables.concrete_grades),
            "mortar_ratios": list(tables.mortar_ratios),
        }

    raise ValueError(f"Unknown command: {parsed.command}")


def cli_main(args: list = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code: 0 ok, 1 calculation error, 2 invalid input
    """
    from pydantic import ValidationError

    from ..errors import CommitRejected, EstimationError
    from .config import load_config

    parser = build_parser()
    parsed = parser.parse_args(args)

    config = load_config(parsed.config)
    setup_logging(
        level=parsed.log_level or config.logging.level,
        log_file=parsed.log_file or config.logging.log_file,
        json_format=config.logging.json_logs,
        format_string=config.logging.format,
    )

    try:
        _print(run_command(parsed))
        return 0

    except CommitRejected as e:
        logger.warning(f"Estimate rejected: {e.message}")
        _print(e.to_dict())
        return 2
    except ValidationError as e:
        logger.warning(f"Invalid request: {e.error_count()} error(s)")
        _print({"errors": json.loads(e.json())})
        return 2
    except EstimationError as e:
        logger.error(f"Calculation failed: {e.message}")
        _print({"error": e.to_field_error().to_dict()})
        return 1
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read request: {e}")
        return 2
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(cli_main())
