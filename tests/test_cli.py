"""End-to-end tests for the vpn-client command line."""
import re
from datetime import date, datetime, timedelta, timezone

import pytest
from click.testing import CliRunner

from vpnclient.cli import main
from vpnclient.state import EventLog, Status

TIMESTAMP = re.compile(r"Timestamp: (\S+)")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def run(runner, event_log, outcomes, clock):
    """Invoke the CLI against the temporary event log"""

    def _run(*args):
        obj = {
            "config": {},
            "log": event_log,
            "outcomes": outcomes,
            "clock": clock,
        }
        return runner.invoke(main, list(args), obj=obj)

    return _run


def lines(result):
    return result.output.strip().splitlines()


class TestRouting:
    """Tests for command dispatch."""

    def test_no_arguments_prints_usage(self, runner):
        result = runner.invoke(main, [])

        assert result.exit_code == 0
        assert lines(result) == [
            "Usage: vpn-client <command> [options]",
            "Commands:",
            "  status",
            "  up",
            "  down",
            "  history",
        ]

    def test_unknown_command(self, run):
        result = run("does not exist")

        assert result.exit_code == 0
        assert result.output.strip() == "Unknown command: does not exist"

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestUpDown:
    """Tests for the up and down commands."""

    def test_up(self, run, outcomes, event_log):
        outcomes.push(True)
        result = run("up")

        assert result.exit_code == 0
        assert lines(result) == ["Starting...", "Status: UP"]
        assert len(event_log.load()) == 2

    def test_up_failure(self, run, outcomes):
        outcomes.push(False)
        result = run("up")

        assert lines(result) == ["Starting...", "Status: FAILED"]

    def test_already_up(self, run, outcomes, event_log):
        outcomes.push(True)
        run("up")

        result = run("up")
        assert result.exit_code == 0
        assert result.output.strip() == "Already UP"
        assert len(event_log.load()) == 2

    def test_down(self, run, outcomes):
        outcomes.push(True)
        result = run("down")

        assert result.exit_code == 0
        assert lines(result) == ["Stopping...", "Status: DOWN"]

    def test_already_down(self, run, outcomes):
        outcomes.push(True)
        run("down")

        result = run("down")
        assert result.output.strip() == "Already DOWN"

    def test_down_after_up(self, run, outcomes):
        outcomes.push(True, False)
        run("up")

        result = run("down")
        assert lines(result) == ["Stopping...", "Status: FAILED"]

    def test_corrupt_log_fails(self, run, events_file):
        events_file.write_text("not json")
        result = run("up")

        assert result.exit_code == 1
        assert "Corrupted event log" in result.output


class TestStatus:
    """Tests for the status command."""

    def test_no_events(self, run):
        result = run("status")

        assert result.exit_code == 1
        assert result.output.strip() == "No events found"

    def test_up_with_uptime(self, run, outcomes, clock):
        outcomes.push(True)
        run("up")
        clock.advance(seconds=3)

        result = run("status")
        assert result.exit_code == 0
        assert lines(result) == ["Status: UP", "Uptime: 3 seconds"]

    def test_down(self, run, outcomes):
        outcomes.push(True)
        run("down")

        result = run("status")
        assert result.exit_code == 0
        assert result.output.strip() == "Status: DOWN"

    def test_uptime_reset_after_restart(self, run, outcomes, clock):
        outcomes.push(True, True, True)
        run("up")
        clock.advance(seconds=2)
        run("down")
        clock.advance(seconds=2)
        run("up")

        result = run("status")
        assert lines(result) == ["Status: UP", "Uptime: 0 seconds"]


class TestHistory:
    """Tests for the history command."""

    def test_empty_log(self, run):
        result = run("history")

        assert result.exit_code == 0
        assert result.output.strip() == "No events found"

    def test_lists_events(self, run, outcomes):
        outcomes.push(True)
        run("up")

        result = run("history")
        assert lines(result) == [
            "Status: STARTING, Timestamp: 2024-11-09T15:18:33",
            "Status: UP, Timestamp: 2024-11-09T15:18:33",
        ]

    def test_range_in_the_future(self, run, outcomes):
        outcomes.push(True)
        run("up")
        start = date(2024, 11, 9) + timedelta(days=5)
        end = date(2024, 11, 9) + timedelta(days=10)

        result = run("history", "--from", start.isoformat(), "--to", end.isoformat())
        assert result.output.strip() == "No events found"

    def test_missing_to_date(self, run, outcomes):
        outcomes.push(True)
        run("up")

        result = run("history", "--from", "2029-11-09")
        assert result.exit_code == 0
        assert result.output.strip() == "No events found"

    @pytest.mark.parametrize("order, descending", [("asc", False), ("desc", True)])
    def test_sorted_within_range(self, run, outcomes, clock, order, descending):
        outcomes.push(True, True, True)
        run("up")
        clock.advance(seconds=60)
        run("down")
        clock.advance(seconds=60)
        run("up")

        result = run("history", "--sort", order, "--from", "2024-10-30", "--to", "2024-11-19")
        stamps = [
            datetime.fromisoformat(match).replace(tzinfo=timezone.utc)
            for match in TIMESTAMP.findall(result.output)
        ]

        assert len(stamps) == 6
        assert stamps == sorted(stamps, reverse=descending)

    def test_short_options(self, run, outcomes, clock):
        outcomes.push(True, True)
        run("up")
        clock.advance(seconds=60)
        run("down")

        result = run("history", "-s", "desc", "-S", "STOPPING", "-f", "2024-11-09", "-t", "2024-11-09")
        assert lines(result) == ["Status: STOPPING, Timestamp: 2024-11-09T15:19:33"]

    def test_status_filter(self, run, outcomes):
        outcomes.push(True, True, True)
        run("up")
        run("down")
        run("up")

        result = run("history", "--status", "STARTING")
        output = lines(result)
        assert len(output) == 2
        for line in output:
            assert line.split("Status: ")[1].split(",")[0] == "STARTING"

    def test_invalid_date(self, run):
        result = run("history", "--from", "2024-31-12", "--to", "2024-12-31")

        assert result.exit_code == 1
        assert "2024-31-12" in result.output
        assert "month" in result.output
        assert "Status:" not in result.output

    def test_invalid_status(self, run, outcomes):
        outcomes.push(True, True)
        run("up")
        run("down")

        result = run("history", "--status", "INVALID_STATUS")
        assert result.exit_code == 1
        assert "INVALID_STATUS" in result.output
        assert "Status:" not in result.output

    def test_unrecognized_sort_keeps_insertion_order(self, run, seed_events):
        seed_events(("UP", 1731165573000), ("DOWN", 1731165513000))

        result = run("history", "--sort", "sideways")
        assert result.exit_code == 0
        assert lines(result) == [
            "Status: UP, Timestamp: 2024-11-09T15:19:33",
            "Status: DOWN, Timestamp: 2024-11-09T15:18:33",
        ]


class TestConfigWiring:
    """Tests for building the event log from configuration."""

    def test_events_file_from_config(self, runner, tmp_path):
        events_file = tmp_path / "from-config.json"
        config_file = tmp_path / "config.yaml"
        config_file.write_text(f"paths:\n  events_file: {events_file}\nsimulation:\n  seed: 5\n")

        result = runner.invoke(main, ["--config", str(config_file), "down"])

        assert result.exit_code == 0
        assert result.output.startswith("Stopping...")
        events = [event.status for event in EventLog(events_file).load()]
        assert events[0] == Status.STOPPING
        assert events[1] in (Status.DOWN, Status.FAILED)
