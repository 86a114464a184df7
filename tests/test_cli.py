"""
Tests for the CLI interface.
"""
import os
import tempfile
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from recycle_tracker.cli.main import app, EXIT_CODE_OK, EXIT_CODE_ERROR

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep handlers off the runner's captured streams."""
    with patch('recycle_tracker.cli.main.configure_logging') as mock:
        yield mock


@pytest.fixture
def db_path():
    """Temporary database path."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield os.path.join(temp_dir, "cli.db")


def invoke(db_path, *args):
    return runner.invoke(app, ["--db", db_path, *args])


class TestCLI:
    """Test CLI commands."""

    def test_no_command_prints_hint(self, db_path):
        """Test bare invocation prints usage hint."""
        result = invoke(db_path)
        assert result.exit_code == EXIT_CODE_OK
        assert "Use --help" in result.output

    def test_init(self, db_path):
        """Test init creates the database."""
        result = invoke(db_path, "init")
        assert result.exit_code == EXIT_CODE_OK
        assert "Database initialized successfully" in result.output
        assert os.path.exists(db_path)

    def test_scan_known_and_unknown(self, db_path):
        """Test scan reports known items and fails on unknown barcodes."""
        invoke(db_path, "seed")

        result = invoke(db_path, "scan", "1234567890")
        assert result.exit_code == EXIT_CODE_OK
        assert "Plastic Bottle" in result.output
        assert "$0.05" in result.output

        result = invoke(db_path, "scan", "0000000000")
        assert result.exit_code == EXIT_CODE_ERROR
        assert "Unknown barcode" in result.output

    def test_add_item_then_scan(self, db_path):
        """Test registering an unknown barcode makes it scannable."""
        result = invoke(db_path, "add-item", "0000000000", "Mystery Item", "0.07")
        assert result.exit_code == EXIT_CODE_OK

        result = invoke(db_path, "scan", "0000000000")
        assert result.exit_code == EXIT_CODE_OK
        assert "Mystery Item" in result.output
        assert "$0.07" in result.output

    def test_add_item_negative_value(self, db_path):
        """Test negative values are rejected."""
        result = invoke(db_path, "add-item", "--", "1", "Broken", "-1")
        assert result.exit_code == EXIT_CODE_ERROR
        assert "cannot be negative" in result.output

    def test_register_and_login(self, db_path):
        """Test account registration and login."""
        result = invoke(db_path, "register", "newuser", "--password", "pw")
        assert result.exit_code == EXIT_CODE_OK
        assert "user1" in result.output

        result = invoke(db_path, "login", "newuser", "--password", "pw")
        assert result.exit_code == EXIT_CODE_OK
        assert "user1" in result.output

        result = invoke(db_path, "login", "newuser", "--password", "bad")
        assert result.exit_code == EXIT_CODE_ERROR
        assert "Invalid username or password" in result.output

    def test_register_duplicate(self, db_path):
        """Test duplicate usernames fail."""
        invoke(db_path, "register", "demo", "--password", "pw")
        result = invoke(db_path, "register", "demo", "--password", "pw")
        assert result.exit_code == EXIT_CODE_ERROR
        assert "already registered" in result.output

    def test_record_and_stats(self, db_path):
        """Test recording a scan updates the user's stats."""
        invoke(db_path, "add-item", "1234567890", "Plastic Bottle", "0.05")
        invoke(db_path, "register", "demo", "--password", "pw")

        result = invoke(db_path, "record", "1234567890", "--user", "demo", "--password", "pw")
        assert result.exit_code == EXIT_CODE_OK
        assert "Added Plastic Bottle" in result.output

        result = invoke(db_path, "stats", "--user", "demo", "--password", "pw")
        assert result.exit_code == EXIT_CODE_OK
        assert "Total items recycled: 1" in result.output
        assert "Total value: $0.05" in result.output
        assert "0.1 lbs" in result.output

    def test_record_unknown_barcode(self, db_path):
        """Test recording an unknown barcode fails."""
        invoke(db_path, "register", "demo", "--password", "pw")
        result = invoke(db_path, "record", "999", "--user", "demo", "--password", "pw")
        assert result.exit_code == EXIT_CODE_ERROR
        assert "Unknown barcode" in result.output

    def test_record_bad_credentials(self, db_path):
        """Test recording requires a valid login."""
        result = invoke(db_path, "record", "1", "--user", "ghost", "--password", "pw")
        assert result.exit_code == EXIT_CODE_ERROR

    def test_stats_empty_history(self, db_path):
        """Test stats for a user without events."""
        invoke(db_path, "register", "demo", "--password", "pw")
        result = invoke(db_path, "stats", "--user", "demo", "--password", "pw")
        assert result.exit_code == EXIT_CODE_OK
        assert "Total items recycled: 0" in result.output
        assert "No recycled items yet" in result.output

    def test_seed_and_leaderboard(self, db_path):
        """Test leaderboard ranks seeded users by each metric."""
        result = invoke(db_path, "seed")
        assert result.exit_code == EXIT_CODE_OK

        result = invoke(db_path, "leaderboard")
        assert result.exit_code == EXIT_CODE_OK
        assert result.output.index("recycleKing") < result.output.index("demo")
        assert "8 items" in result.output

        result = invoke(db_path, "leaderboard", "--metric", "value", "--limit", "1")
        assert result.exit_code == EXIT_CODE_OK
        assert "recycleKing" in result.output
        assert "$0.95" in result.output
        assert "greenEarth" not in result.output

    def test_leaderboard_invalid_metric(self, db_path):
        """Test unknown metrics are rejected by the option parser."""
        result = invoke(db_path, "leaderboard", "--metric", "weight")
        assert result.exit_code != EXIT_CODE_OK

    def test_leaderboard_empty(self, db_path):
        """Test leaderboard with no users."""
        result = invoke(db_path, "leaderboard")
        assert result.exit_code == EXIT_CODE_OK
        assert "No users yet" in result.output

    def test_bad_config_file(self, db_path):
        """Test a missing config file exits with an error."""
        result = runner.invoke(app, ["--config", "/nonexistent.yaml", "--db", db_path, "init"])
        assert result.exit_code == EXIT_CODE_ERROR
        assert "Error loading config" in result.output

    def test_malformed_config_file(self, db_path):
        """Test invalid YAML reports a config error instead of crashing."""
        config_path = os.path.join(os.path.dirname(db_path), "broken.yaml")
        with open(config_path, 'w') as f:
            f.write("storage: [unclosed")

        result = runner.invoke(app, ["--config", config_path, "--db", db_path, "init"])
        assert result.exit_code == EXIT_CODE_ERROR
        assert "Error loading config" in result.output

    @pytest.mark.parametrize("limit", ["0", "-3"])
    def test_leaderboard_rejects_non_positive_limit(self, db_path, limit):
        """Test leaderboard limits must be at least 1."""
        invoke(db_path, "seed")
        result = invoke(db_path, "leaderboard", "--limit", limit)
        assert result.exit_code != EXIT_CODE_OK
        assert "No users yet" not in result.output

    def test_catalog_lists_entries(self, db_path):
        """Test catalog lists every registered barcode."""
        result = invoke(db_path, "catalog")
        assert result.exit_code == EXIT_CODE_OK
        assert "Catalog is empty" in result.output

        invoke(db_path, "seed")
        result = invoke(db_path, "catalog")
        assert result.exit_code == EXIT_CODE_OK
        assert "9876543210" in result.output
        assert "Aluminum Beer Can" in result.output
        assert "$0.15" in result.output
