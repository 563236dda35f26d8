# ruff: noqa: E501
from pathlib import Path

import pytest
from typer.testing import CliRunner

import spend_analysis.providers as providers_mod
from spend_analysis.cli import app
from tests.helpers.provider_stub import FakeOpenAIClient, reply_json

runner = CliRunner()

_STATEMENT = (
    "Date,Merchant,Description,Amount\n"
    "2024-01-15,Whole Foods,Grocery shopping,-87.50\n"
    "invalid-date,Shell,Fuel,-45.00\n"
    "2024-01-16,Netflix,Monthly subscription,-15.99\n"
)


def _write(tmp_path: Path, text: str, name: str = "statement.csv") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_command_lists_rows_and_errors(tmp_path: Path) -> None:
    path = _write(tmp_path, _STATEMENT)
    result = runner.invoke(app, ["parse", "--csv-path", str(path)])

    assert result.exit_code == 0, result.output
    assert "2 transaction(s)" in result.output
    assert "Row 3: Invalid date format: invalid-date" in result.output


def test_parse_command_fails_on_structural_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "foo,bar\n1,2\n")
    result = runner.invoke(app, ["parse", "--csv-path", str(path)])

    assert result.exit_code == 1
    assert "required columns" in result.output


def test_missing_file_is_reported(tmp_path: Path) -> None:
    result = runner.invoke(app, ["parse", "--csv-path", str(tmp_path / "nope.csv")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_import_command_prints_summary(tmp_path: Path) -> None:
    path = _write(tmp_path, _STATEMENT)
    result = runner.invoke(app, ["import", "--csv-path", str(path), "--concurrency", "2"])

    assert result.exit_code == 0, result.output
    assert "using keyword rules only" in result.output
    assert "Imported 2 of 3 transactions; 1 error(s)" in result.output


def test_import_command_reports_duplicate_rows(tmp_path: Path) -> None:
    path = _write(tmp_path, "Date,Merchant,Amount\n2024-01-15,Shell,-45.00\n2024-01-15,Shell,-45.00\n")
    result = runner.invoke(app, ["import", "--csv-path", str(path)])

    assert result.exit_code == 0, result.output
    assert "Imported 1 of 2 transactions; 1 duplicate(s) skipped" in result.output


def test_categorize_command_uses_rules_without_credentials() -> None:
    result = runner.invoke(
        app, ["categorize", "--merchant", "Whole Foods", "--amount=-87.50", "--description", "Grocery shopping"]
    )

    assert result.exit_code == 0, result.output
    assert "Groceries" in result.output
    assert "source=rules" in result.output


def test_categorize_command_rejects_bad_amount() -> None:
    result = runner.invoke(app, ["categorize", "--merchant", "Shell", "--amount", "lots"])
    assert result.exit_code == 1
    assert "invalid amount" in result.output


def test_categorize_command_uses_remote_provider_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeOpenAIClient(reply_json(category="Travel", subcategory="Flights", confidence=0.93))
    monkeypatch.setattr(providers_mod, "OpenAI", lambda **kw: client)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    result = runner.invoke(app, ["categorize", "--merchant", "Delta", "--amount=-420"])

    assert result.exit_code == 0, result.output
    assert "Travel / Flights" in result.output
    assert "source=remote" in result.output
    assert len(client.calls) == 1


def test_dotenv_file_supplies_credentials(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # conftest chdirs into tmp_path, where the CLI looks for .env
    (tmp_path / ".env").write_text("OPENAI_API_KEY=sk-from-dotenv\n", encoding="utf-8")
    seen: list[dict] = []

    def _openai(**kwargs):
        seen.append(kwargs)
        return FakeOpenAIClient(reply_json(category="Housing"))

    monkeypatch.setattr(providers_mod, "OpenAI", _openai)
    # load_dotenv writes into os.environ; let monkeypatch restore it afterwards.
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.delenv("OPENAI_API_KEY")

    result = runner.invoke(app, ["categorize", "--merchant", "Landlord", "--amount=-1500"])

    assert result.exit_code == 0, result.output
    assert seen == [{"api_key": "sk-from-dotenv"}]


def test_parse_command_renders_very_large_amounts(tmp_path: Path) -> None:
    path = _write(tmp_path, "Date,Merchant,Amount\n2024-01-15,Treasury,999999999999999999999999999.50\n")
    result = runner.invoke(app, ["parse", "--csv-path", str(path)])
    assert result.exit_code == 0, result.output
    assert "1 transaction(s)" in result.output
