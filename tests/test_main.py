"""Unit tests for the main entry point.

Tests the main() function including:
- CLI argument parsing
- Configuration loading with priority (CLI > env > config)
- Seeding, recommending and explaining against a file database
- Error envelopes and exit codes
"""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from app.config.environment import EnvironmentConfig
from app.config.models import AppConfig, LoggingConfig
from app.main import build_parser, load_runtime_config, main

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SEED_FILE = FIXTURES_DIR / "sample_seed.yaml"


@pytest.fixture(autouse=True)
def reset_root_logging():
    """Drop handlers main() installed so they never write to a closed capture stream."""
    yield
    logging.getLogger().handlers.clear()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Run the CLI from an empty directory against a throwaway SQLite file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    return tmp_path


@pytest.fixture
def seeded(cli_env, capsys):
    assert main(["seed", "--data", str(SEED_FILE)]) == 0
    capsys.readouterr()
    return cli_env


def _stdout_json(capsys):
    return json.loads(capsys.readouterr().out)


class TestBuildParser:
    """Test suite for argument parsing."""

    def test_recommend_defaults_to_json(self):
        args = build_parser().parse_args(["recommend", "--student-id", "7"])

        assert args.command == "recommend"
        assert args.student_id == 7
        assert args.output_format == "json"
        assert args.config is None

    def test_global_options(self):
        args = build_parser().parse_args(
            ["--config", "custom.yaml", "--log-level", "DEBUG", "explain",
             "--student-id", "1", "--match-id", "3", "--format", "text"]
        )

        assert args.config == Path("custom.yaml")
        assert args.log_level == "DEBUG"
        assert args.match_id == 3
        assert args.output_format == "text"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_student_id_must_be_integer(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["recommend", "--student-id", "abc"])


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    def test_log_level_priority(self):
        """Test log level priority: CLI > env > config."""
        with patch("app.main.load_config") as mock_load:
            mock_app_config = AppConfig(logging=LoggingConfig(level="WARNING"))
            mock_env_config = EnvironmentConfig(log_level="INFO")
            mock_load.return_value = (mock_app_config, mock_env_config)

            # CLI override takes precedence
            _, env_config = load_runtime_config(None, "DEBUG")
            assert env_config.log_level == "DEBUG"

            # Env override takes precedence over config
            mock_env_config.log_level = "INFO"
            _, env_config = load_runtime_config(None, None)
            assert env_config.log_level == "INFO"

            # Config value used when no overrides
            mock_env_config.log_level = None
            _, env_config = load_runtime_config(None, None)
            assert env_config.log_level == "WARNING"

    def test_defaults_without_config_file(self, cli_env):
        app_config, env_config = load_runtime_config(None, None)

        assert app_config.matching.inclusion_threshold == 55
        assert env_config.log_level == "INFO"
        assert env_config.database_url.endswith("cli.db")


class TestMain:
    """Test suite for main() function."""

    def test_seed_reports_counts(self, cli_env, capsys):
        exit_code = main(["seed", "--data", str(SEED_FILE)])

        assert exit_code == 0
        assert _stdout_json(capsys) == {"students_written": 2, "scholarships_written": 3}
        assert (cli_env / "cli.db").exists()

    def test_recommend_json(self, seeded, capsys):
        exit_code = main(["recommend", "--student-id", "1"])

        assert exit_code == 0
        payload = _stdout_json(capsys)
        # Scholarship 30 is past its deadline
        assert [item["scholarship_id"] for item in payload] == [10, 20]
        assert [item["match_score"] for item in payload] == [125, 90]
        assert payload[0]["title"] == "Women in Computing Award"
        assert payload[0]["unmatched_criteria"] == []

    def test_recommend_is_repeatable(self, seeded, capsys):
        """Test running twice replaces the stored matches instead of duplicating them."""
        main(["recommend", "--student-id", "1"])
        first = _stdout_json(capsys)
        main(["recommend", "--student-id", "1"])
        second = _stdout_json(capsys)

        assert [item["scholarship_id"] for item in second] == [10, 20]
        assert [item["match_score"] for item in second] == [
            item["match_score"] for item in first
        ]

    def test_recommend_with_no_matches(self, seeded, capsys):
        exit_code = main(["recommend", "--student-id", "2"])

        assert exit_code == 0
        assert _stdout_json(capsys) == []

    def test_recommend_text(self, seeded, capsys):
        exit_code = main(["recommend", "--student-id", "1", "--format", "text"])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "Scholarship recommendations for student 1" in output
        assert "1. Women in Computing Award (score 125)" in output
        assert "2. Open Undergraduate Grant (score 90)" in output

    def test_recommend_unknown_student(self, seeded, capsys):
        exit_code = main(["recommend", "--student-id", "99"])

        assert exit_code == 1
        assert _stdout_json(capsys) == {"error": "Student profile not found", "status": 404}

    def test_explain_json(self, seeded, capsys):
        main(["recommend", "--student-id", "1"])
        match_id = _stdout_json(capsys)[1]["match_id"]

        exit_code = main(["explain", "--student-id", "1", "--match-id", str(match_id)])

        assert exit_code == 0
        payload = _stdout_json(capsys)
        assert payload["match_id"] == match_id
        assert payload["scholarship_id"] == 20
        assert payload["match_score"] == 90
        assert payload["matched_count"] == 3
        assert payload["total_criteria"] == 3

    def test_explain_text(self, seeded, capsys):
        main(["recommend", "--student-id", "1"])
        match_id = _stdout_json(capsys)[0]["match_id"]

        exit_code = main(
            ["explain", "--student-id", "1", "--match-id", str(match_id), "--format", "text"]
        )

        output = capsys.readouterr().out
        assert exit_code == 0
        assert f"Match {match_id} for student 1" in output
        assert "Met:" in output

    def test_explain_other_students_match(self, seeded, capsys):
        main(["recommend", "--student-id", "1"])
        match_id = _stdout_json(capsys)[0]["match_id"]

        exit_code = main(["explain", "--student-id", "2", "--match-id", str(match_id)])

        assert exit_code == 1
        assert _stdout_json(capsys) == {"error": "Unauthorized access", "status": 403}

    def test_explain_unknown_match(self, seeded, capsys):
        exit_code = main(["explain", "--student-id", "1", "--match-id", "999"])

        assert exit_code == 1
        assert _stdout_json(capsys) == {"error": "Recommendation not found", "status": 404}

    def test_configuration_error(self, cli_env, capsys):
        """Test a missing explicit config file exits with 1 and a readable message."""
        exit_code = main(["--config", "nonexistent.yaml", "recommend", "--student-id", "1"])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "Configuration Error" in captured.err
        assert captured.out == ""

    def test_invalid_seed_file(self, cli_env, capsys):
        seed_file = cli_env / "bad.yaml"
        seed_file.write_text("students:\n  - country: Kenya\n")

        exit_code = main(["seed", "--data", str(seed_file)])

        assert exit_code == 1
        assert "Seed data validation failed" in capsys.readouterr().err

    def test_unexpected_error_envelope(self, seeded, capsys):
        with patch("app.main.RecommendationService") as mock_service:
            mock_service.return_value.recompute.side_effect = RuntimeError("boom")

            exit_code = main(["recommend", "--student-id", "1"])

        assert exit_code == 1
        assert _stdout_json(capsys) == {"error": "An unexpected error occurred", "status": 500}

    @patch("app.main.close_database")
    @patch("app.main.init_database")
    @patch("app.main.configure_logging")
    def test_log_level_override(self, mock_configure_logging, mock_init_db, mock_close_db, cli_env):
        """Test that --log-level reaches configure_logging."""
        mock_init_db.side_effect = RuntimeError("exit early")

        main(["--log-level", "DEBUG", "seed", "--data", str(SEED_FILE)])

        assert mock_configure_logging.call_args.kwargs["level"] == "DEBUG"
        mock_close_db.assert_called_once()
