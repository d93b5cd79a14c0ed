"""Main entry point for the Scholarship Matcher command-line interface."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from app.catalog.loader import load_seed_file, seed_database
from app.config.environment import EnvironmentConfig
from app.config.exceptions import ConfigurationError
from app.config.loader import load_config
from app.config.models import AppConfig
from app.logging import get_logger
from app.logging.config import configure_logging
from app.persistence.database import close_database, init_database
from app.persistence.exceptions import PersistenceError
from app.recommendation import (
    RecommendationError,
    RecommendationService,
    build_scorer,
    error_envelope,
)
from app.reporting import TemplateRenderer, build_breakdown_context, build_digest_context
from app.utils.timestamps import utc_now

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file (None searches the defaults)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with the effective log level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Apply log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    else:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scholarship-matcher",
        description="Scholarship Matcher - score and rank scholarships for student profiles",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    recommend = subparsers.add_parser(
        "recommend", help="Recompute and print a student's recommendations"
    )
    recommend.add_argument("--student-id", type=int, required=True)
    recommend.add_argument(
        "--format",
        dest="output_format",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)",
    )

    explain = subparsers.add_parser(
        "explain", help="Print the criteria behind one stored recommendation"
    )
    explain.add_argument("--student-id", type=int, required=True)
    explain.add_argument("--match-id", type=int, required=True)
    explain.add_argument(
        "--format",
        dest="output_format",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)",
    )

    seed = subparsers.add_parser(
        "seed", help="Load student profiles and scholarships from a YAML file"
    )
    seed.add_argument("--data", type=Path, required=True, help="Path to seed YAML file")

    return parser


def run_recommend(args, service: RecommendationService, renderer: TemplateRenderer) -> int:
    run = service.recompute(args.student_id)

    if args.output_format == "text":
        context = build_digest_context(args.student_id, run.recommendations, utc_now())
        print(renderer.render_digest(context), end="")
    else:
        print(json.dumps([rec.to_payload() for rec in run.recommendations], indent=2))

    logger.info(
        f"Returned {run.returned_count} recommendations for student {args.student_id}",
        extra={
            "event": "cli.recommend.completed",
            "student_id": args.student_id,
            "returned_count": run.returned_count,
        },
    )
    return 0


def run_explain(args, service: RecommendationService, renderer: TemplateRenderer) -> int:
    breakdown = service.get_match_breakdown(args.student_id, args.match_id)

    if args.output_format == "text":
        print(renderer.render_breakdown(build_breakdown_context(args.student_id, breakdown)), end="")
    else:
        print(json.dumps(breakdown.to_payload(), indent=2))
    return 0


def run_seed(args) -> int:
    seed = load_seed_file(args.data)
    result = seed_database(seed)
    print(
        json.dumps(
            {
                "students_written": result.students_written,
                "scholarships_written": result.scholarships_written,
            },
            indent=2,
        )
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Scholarship Matcher.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for any failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        # Step 1: Load configuration early (before logging for format detection)
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.debug(
            "Scholarship Matcher starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
            },
        )

        # Step 3: Initialize database
        init_database(env_config.database_url)

        # Step 4: Dispatch
        if args.command == "seed":
            return run_seed(args)

        service = RecommendationService(
            scorer=build_scorer(app_config),
            matching_config=app_config.matching,
        )
        renderer = TemplateRenderer()

        if args.command == "recommend":
            return run_recommend(args, service, renderer)
        return run_explain(args, service, renderer)

    except ConfigurationError as e:
        # Configuration and seed errors are already formatted nicely
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": type(e).__name__},
        )
        return 1
    except (RecommendationError, PersistenceError) as e:
        print(json.dumps(error_envelope(e)))
        logger.error(
            f"Command failed: {e}",
            extra={
                "event": "service.command.failed",
                "command": args.command,
                "error_type": type(e).__name__,
            },
        )
        return 1
    except Exception as e:
        print(json.dumps(error_envelope(e)))
        logger.critical(
            "Unexpected error",
            extra={
                "event": "service.command.crashed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1
    finally:
        close_database()
        logger.debug(
            "Scholarship Matcher stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )


if __name__ == "__main__":
    sys.exit(main())
