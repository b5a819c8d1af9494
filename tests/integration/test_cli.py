"""Integration tests for the expense-search command line."""

from __future__ import annotations

import json
import locale
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from expense_search.cli import cli
from expense_search.search.query import build_canned_search_query, build_search_query_json


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _run(runner: CliRunner, config: Path, *args: str) -> Result:
    return runner.invoke(cli, ["--config", str(config), "--no-color", *args])


# ---------------------------------------------------------------------------
# Group options
# ---------------------------------------------------------------------------


class TestGroup:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "expense-search" in result.output

    def test_help_command(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(runner, sample_config, "help", "normalize")
        assert result.exit_code == 0
        assert "normalize" in result.output

    def test_help_unknown_command(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(runner, sample_config, "help", "bogus")
        assert result.exit_code == 1

    def test_commands_registered(self) -> None:
        for name in ("parse", "normalize", "hash", "form", "build", "results", "init-config"):
            assert name in cli.commands

    def test_invalid_config_exits_with_config_error(
        self, runner: CliRunner, temp_dir: Path
    ) -> None:
        config_path = temp_dir / "broken.toml"
        config_path.write_text("not [ toml")
        result = _run(runner, config_path, "hash", "coffee")
        assert result.exit_code == 3

    def test_missing_config_uses_defaults(self, runner: CliRunner, temp_dir: Path) -> None:
        result = _run(runner, temp_dir / "none.toml", "-q", "hash")
        assert result.exit_code == 0
        canned = build_canned_search_query("expense", "all")
        assert result.output.strip() == str(build_search_query_json(canned).query.hash)

    def test_collation_taken_from_environment(
        self, runner: CliRunner, sample_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[tuple[int, str]] = []
        monkeypatch.setattr(
            locale, "setlocale", lambda category, name: calls.append((category, name))
        )
        result = _run(runner, sample_config, "hash", "coffee")
        assert result.exit_code == 0
        assert calls == [(locale.LC_COLLATE, "")]

    def test_unsupported_locale_is_not_fatal(
        self, runner: CliRunner, sample_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail(category: int, name: str) -> str:
            raise locale.Error("unsupported locale setting")

        monkeypatch.setattr(locale, "setlocale", fail)
        result = _run(runner, sample_config, "hash", "coffee")
        assert result.exit_code == 0
        assert result.output.strip() == str(build_search_query_json("coffee").query.hash)


# ---------------------------------------------------------------------------
# Query commands
# ---------------------------------------------------------------------------


class TestQueryCommands:
    def test_normalize(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(runner, sample_config, "normalize", "merchant:Starbucks type:expense")
        assert result.exit_code == 0
        assert result.output.strip() == (
            "type:expense status:all sortBy:date sortOrder:desc merchant:Starbucks"
        )

    def test_normalize_joins_arguments(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(runner, sample_config, "normalize", "coffee", "amount>5")
        assert result.output.strip().endswith("amount>5 coffee")

    def test_normalize_with_hash(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(runner, sample_config, "normalize", "--with-hash", "coffee")
        expected = build_search_query_json("coffee").query.hash
        assert result.output.strip().endswith(f"#{expected}")

    def test_hash_is_order_independent(self, runner: CliRunner, sample_config: Path) -> None:
        first = _run(runner, sample_config, "hash", "category:A,B amount>5")
        second = _run(runner, sample_config, "hash", "amount>5 category:B,A")
        assert first.exit_code == 0
        assert first.output == second.output
        expected = build_search_query_json("amount>5 category:A,B").query.hash
        assert int(first.output.strip()) == expected

    def test_parse_json(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(runner, sample_config, "parse", "--json", "type:trip amount>100")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["type"] == "trip"
        assert data["flatFilters"] == {"amount": [{"operator": "gt", "value": "100"}]}

    def test_parse_table(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(runner, sample_config, "parse", "category:Travel,Meals coffee")
        assert result.exit_code == 0
        assert "Travel" in result.output
        assert "keyword" in result.output

    @pytest.mark.parametrize("command", ["parse", "normalize", "hash"])
    def test_parse_error_exit_code(
        self, runner: CliRunner, sample_config: Path, command: str
    ) -> None:
        result = _run(runner, sample_config, command, "merchant:")
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# Form commands
# ---------------------------------------------------------------------------


class TestFormCommands:
    def test_form_json(self, runner: CliRunner, sample_config: Path, reference_file: Path) -> None:
        result = _run(
            runner,
            sample_config,
            "form",
            "--json",
            "-r",
            str(reference_file),
            "policyID:P1 tag:Engineering,Sales",
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "tag": ["Engineering"],
            "type": "expense",
            "status": "all",
            "policyID": "P1",
        }

    def test_form_standardize(
        self, runner: CliRunner, sample_config: Path, reference_file: Path
    ) -> None:
        result = _run(
            runner,
            sample_config,
            "form",
            "--json",
            "--standardize",
            "-r",
            str(reference_file),
            "from:jane@example.com",
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["from"] == ["1"]

    def test_form_table(self, runner: CliRunner, sample_config: Path, reference_file: Path) -> None:
        result = _run(runner, sample_config, "form", "-r", str(reference_file), "cardID:11")
        assert result.exit_code == 0
        assert "cardID:Chase" in result.output

    def test_form_bad_reference(self, runner: CliRunner, sample_config: Path, temp_dir: Path) -> None:
        path = temp_dir / "bad.json"
        path.write_text("[1, 2]")
        result = _run(runner, sample_config, "form", "-r", str(path), "coffee")
        assert result.exit_code == 2

    def test_build(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(
            runner,
            sample_config,
            "build",
            "--category",
            "Travel",
            "--category",
            "Meals",
            "--greater-than",
            "100",
        )
        assert result.exit_code == 0
        assert result.output.strip() == (
            "sortBy:date sortOrder:desc type:expense status:all category:Travel,Meals amount>100"
        )

    def test_build_quotes_values(self, runner: CliRunner, sample_config: Path) -> None:
        result = _run(runner, sample_config, "build", "--merchant", "Blue Bottle", "--type", "trip")
        assert result.output.strip() == (
            'sortBy:date sortOrder:desc type:trip status:all merchant:"Blue Bottle"'
        )


# ---------------------------------------------------------------------------
# results
# ---------------------------------------------------------------------------


class TestResultsCommand:
    def test_transactions_sorted_by_date(
        self, runner: CliRunner, sample_config: Path, results_file: Path
    ) -> None:
        result = _run(runner, sample_config, "results", str(results_file), "--json")
        assert result.exit_code == 0
        items = json.loads(result.output)
        assert [item["transaction_id"] for item in items] == ["2", "1", "3"]

    def test_sort_by_amount(
        self, runner: CliRunner, sample_config: Path, results_file: Path
    ) -> None:
        result = _run(
            runner,
            sample_config,
            "results",
            str(results_file),
            "--json",
            "--query",
            "sortBy:amount sortOrder:asc",
        )
        items = json.loads(result.output)
        assert [item["formatted_total"] for item in items] == [1500, 2500, 3000]

    def test_reports(self, runner: CliRunner, sample_config: Path, results_file: Path) -> None:
        result = _run(
            runner,
            sample_config,
            "results",
            str(results_file),
            "--json",
            "-Q",
            "type:expense status:outstanding",
        )
        assert result.exit_code == 0
        reports = json.loads(result.output)
        assert [report["report_id"] for report in reports] == ["100", "200"]
        assert reports[1]["report_name"] == "Jane Doe owes $25.00"
        assert [t["transaction_id"] for t in reports[0]["transactions"]] == ["1", "2"]

    def test_table_output(self, runner: CliRunner, sample_config: Path, results_file: Path) -> None:
        result = _run(runner, sample_config, "results", str(results_file))
        assert result.exit_code == 0
        assert "Starbucks" in result.output
        assert "$15.00" in result.output

    def test_report_table_output(
        self, runner: CliRunner, sample_config: Path, results_file: Path
    ) -> None:
        result = _run(
            runner, sample_config, "results", str(results_file), "-Q", "status:outstanding"
        )
        assert result.exit_code == 0
        assert "Q1 Travel" in result.output
        assert "Jane Doe owes $25.00" in result.output

    def test_chat(
        self,
        runner: CliRunner,
        sample_config: Path,
        temp_dir: Path,
        chat_payload: dict,
    ) -> None:
        path = temp_dir / "chat.json"
        path.write_text(json.dumps(chat_payload))
        result = _run(runner, sample_config, "results", str(path), "-Q", "type:chat", "--json")
        assert result.exit_code == 0
        assert [item["report_action_id"] for item in json.loads(result.output)] == ["a3", "a1"]

    def test_empty_results(self, runner: CliRunner, sample_config: Path, temp_dir: Path) -> None:
        path = temp_dir / "empty.json"
        path.write_text(json.dumps({"data": {}}))
        result = _run(runner, sample_config, "results", str(path))
        assert result.exit_code == 0
        assert "No results" in result.output

    def test_invalid_json(self, runner: CliRunner, sample_config: Path, temp_dir: Path) -> None:
        path = temp_dir / "broken.json"
        path.write_text("{not json")
        result = _run(runner, sample_config, "results", str(path))
        assert result.exit_code == 2

    def test_malformed_entry(self, runner: CliRunner, sample_config: Path, temp_dir: Path) -> None:
        path = temp_dir / "bad.json"
        path.write_text(json.dumps({"data": {"transaction_1": {"amount": 5}}}))
        result = _run(runner, sample_config, "results", str(path))
        assert result.exit_code == 2

    def test_bad_query(self, runner: CliRunner, sample_config: Path, results_file: Path) -> None:
        result = _run(runner, sample_config, "results", str(results_file), "-Q", "amount>>")
        assert result.exit_code == 1
