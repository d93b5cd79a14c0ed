#!/usr/bin/env python3
"""Sample recommendation harness for end-to-end validation.

Seeds a throwaway SQLite database from a YAML catalog, recomputes
recommendations for every student in it, and prints a summary per student.
No configuration file is required.

Usage:
    python scripts/run_sample_recommendations.py

    # Custom seed file and database path
    python scripts/run_sample_recommendations.py --data docs/sample_catalog.yaml --database /tmp/sample.db

    # Only one student, with the full text digest
    python scripts/run_sample_recommendations.py --student-id 1 --show-digest
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from app.catalog.loader import SeedDataError, load_seed_file, seed_database
from app.config.loader import load_config
from app.logging.config import configure_logging
from app.persistence.database import close_database, init_database
from app.recommendation import RecommendationError, RecommendationService, build_scorer
from app.reporting import TemplateRenderer, build_digest_context
from app.utils.timestamps import utc_now


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def print_run_table(run):
    """Print a formatted summary table of one recommendation run."""
    metrics = [
        ("Stale Matches Deleted", run.deleted_count),
        ("Candidates Evaluated", run.candidates_evaluated),
        ("Disqualified", run.disqualified_count),
        ("Below Threshold", run.below_threshold_count),
        ("Matches Stored", run.stored_count),
        ("Recommendations Returned", run.returned_count),
        ("Duration (seconds)", f"{run.duration_seconds:.3f}"),
    ]

    max_label_width = max(len(label) for label, _ in metrics)

    print("┌" + "─" * (max_label_width + 2) + "┬" + "─" * 22 + "┐")
    print(f"│ {'Metric':<{max_label_width}} │ {'Value':<20} │")
    print("├" + "─" * (max_label_width + 2) + "┼" + "─" * 22 + "┤")

    for label, value in metrics:
        print(f"│ {label:<{max_label_width}} │ {str(value):<20} │")

    print("└" + "─" * (max_label_width + 2) + "┴" + "─" * 22 + "┘")

    for rec in run.recommendations:
        print(f"  [{rec.match_score:>3}] {rec.title} (scholarship {rec.scholarship_id})")


def main():
    """Main entry point for the sample recommendation harness."""
    parser = argparse.ArgumentParser(
        description="Seed a sample catalog and compute recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=Path("docs/sample_catalog.yaml"),
        help="Path to seed YAML file (default: docs/sample_catalog.yaml)",
    )
    parser.add_argument(
        "--database",
        type=Path,
        default=Path("data/sample_recommendations.db"),
        help="Path to SQLite database (default: data/sample_recommendations.db)",
    )
    parser.add_argument(
        "--student-id",
        type=int,
        default=None,
        help="Only compute for this student (default: every seeded student)",
    )
    parser.add_argument(
        "--show-digest",
        action="store_true",
        help="Also print the rendered text digest for each student",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )

    args = parser.parse_args()

    load_dotenv()

    print_header("Scholarship Matcher - Sample Recommendation Harness")
    print(f"Seed file: {args.data}")
    print(f"Database: {args.database}")

    try:
        app_config, _ = load_config()
        configure_logging(
            level=args.log_level,
            format_type=app_config.logging.format,
            environment="validation",
        )

        print("\n📋 Loading seed data...")
        seed = load_seed_file(args.data)
        print(f"✓ {len(seed.students)} students, {len(seed.scholarships)} scholarships")

        print(f"\n💾 Initializing database: {args.database}")
        init_database(f"sqlite:///{args.database.absolute()}")
        seed_database(seed)
        print("✓ Database seeded")

        service = RecommendationService(
            scorer=build_scorer(app_config),
            matching_config=app_config.matching,
        )
        renderer = TemplateRenderer()

        student_ids = [s.student_id for s in seed.students]
        if args.student_id is not None:
            student_ids = [args.student_id]

        for student_id in student_ids:
            print_header(f"Student {student_id}")
            try:
                run = service.recompute(student_id)
            except RecommendationError as e:
                print(f"❌ {e.message}")
                continue

            print_run_table(run)
            if args.show_digest:
                print()
                context = build_digest_context(student_id, run.recommendations, utc_now())
                print(renderer.render_digest(context))

        return 0

    except SeedDataError as e:
        print(f"\n❌ {e}")
        return 1
    except Exception as e:
        print(f"\n❌ Error: {e}")
        return 1
    finally:
        close_database()


if __name__ == "__main__":
    sys.exit(main())
