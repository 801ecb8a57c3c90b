import csv
import json

import pytest
from click.testing import CliRunner

from installment_calc.main import cli, parse_amount, parse_scenario_opts


@pytest.fixture
def runner():
    return CliRunner()


class TestParseAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [("10000", 10000.0), ("10k", 10000.0), ("1.5m", 1500000.0), ("250,000", 250000.0), (" 3K ", 3000.0)],
    )
    def test_valid(self, raw, expected):
        assert parse_amount(raw) == expected

    def test_invalid(self):
        import click

        with pytest.raises(click.BadParameter):
            parse_amount("lots")


def test_summary(runner):
    result = runner.invoke(cli, ["summary", "-p", "10k", "-r", "6.5", "-t", "36", "-s", "2026-01-15"])
    assert result.exit_code == 0, result.output
    assert "$306.49" in result.output
    assert "2029-01-15" in result.output
    assert "personal" in result.output


def test_rate_defaults_to_category_average(runner):
    result = runner.invoke(cli, ["summary", "-p", "18000", "-t", "60", "-c", "auto"])
    assert result.exit_code == 0, result.output
    assert "6.50%" in result.output


def test_schedule_prints_all_rows(runner):
    result = runner.invoke(cli, ["schedule", "-p", "10000", "-r", "6.5", "-t", "36"])
    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line and line.split("\t")[0].isdigit()]
    assert len(lines) == 36
    assert lines[-1].split("\t")[-1] == "0.00"


def test_schedule_truncates_long_output(runner):
    result = runner.invoke(cli, ["schedule", "-p", "200k", "-c", "mortgage", "-t", "360"])
    assert result.exit_code == 0, result.output
    assert "Schedule has 360 rows; showing first 120 rows." in result.output


def test_schedule_json_export(runner, tmp_path):
    out = tmp_path / "loan.json"
    result = runner.invoke(
        cli, ["schedule", "-p", "10000", "-r", "6.5", "-t", "36", "-s", "2026-01-15", "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["schedule"]) == 36
    assert data["loanDetails"]["endDate"] == "2029-01-15"
    assert data["monthlyPayment"] == pytest.approx(306.49, abs=0.02)


def test_schedule_csv_export(runner, tmp_path):
    out = tmp_path / "loan.csv"
    result = runner.invoke(cli, ["schedule", "-p", "10000", "-r", "0", "-t", "12", "--output", str(out)])
    assert result.exit_code == 0, result.output
    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Month"
    assert len(rows) == 13
    assert float(rows[1][3]) == 0.0


def test_schedule_unsupported_export(runner, tmp_path):
    result = runner.invoke(cli, ["schedule", "-p", "10000", "-t", "12", "--output", str(tmp_path / "loan.xlsx")])
    assert result.exit_code == 2
    assert "Unsupported output format" in result.output


def test_summary_json_export_omits_schedule(runner, tmp_path):
    out = tmp_path / "summary.json"
    result = runner.invoke(cli, ["summary", "-p", "10000", "-t", "12", "--output", str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert "schedule" not in data
    assert data["loanDetails"]["interestRate"] == 11.5


@pytest.mark.parametrize(
    "args, message",
    [
        (["-p", "0", "-t", "12"], "Principal must be positive"),
        (["-p", "1000", "-t", "0"], "Term must be at least one month"),
        (["-p", "1000", "-t", "12", "-r", "-1"], "Interest rate must not be negative"),
        (["-p", "1000", "-t", "12", "-s", "2026-02-30"], "Invalid date string"),
        (["-p", "1000", "-t", "1201"], "Term must not exceed 1200 months"),
        (["-p", "1000", "-t", "12", "-s", "9999-06-01"], "last supported calendar date"),
    ],
)
def test_invalid_inputs(runner, args, message):
    result = runner.invoke(cli, ["summary", *args])
    assert result.exit_code == 2
    assert message in result.output


def test_rates_lists_all(runner):
    result = runner.invoke(cli, ["rates"])
    assert result.exit_code == 0, result.output
    for name in ("personal", "auto", "mortgage"):
        assert name in result.output
    assert "36.00%" in result.output


def test_rates_single_and_unknown(runner):
    result = runner.invoke(cli, ["rates", "auto"])
    assert "3.50%" in result.output
    assert "mortgage" not in result.output

    result = runner.invoke(cli, ["rates", "boat"])
    assert result.exit_code == 0
    assert "Unknown loan type 'boat'; showing personal rates." in result.output


def test_rates_category_match_is_exact(runner):
    result = runner.invoke(cli, ["rates", "AUTO"])
    assert result.exit_code == 0
    assert "Unknown loan type 'AUTO'; showing personal rates." in result.output
    assert "36.00%" in result.output


def test_compare(runner):
    result = runner.invoke(
        cli,
        ["compare", "--scenario1", "-p 300k -r 5.5 -t 360", "--scenario2", "-p 300k -r 5.0 -t 240 -c mortgage"],
    )
    assert result.exit_code == 0, result.output
    assert "Comparison" in result.output
    assert "total_interest" in result.output


class TestParseScenario:
    def test_defaults(self):
        params = parse_scenario_opts("-p 10k -t 36")
        assert params == {
            "principal": "10k",
            "rate": None,
            "term": 36,
            "category": "personal",
            "start_date": None,
        }

    @pytest.mark.parametrize("opts", ["-p 10k", "-p 10k -t 36 --bogus 1", "-p 10k -t", "-p 10k -t many"])
    def test_invalid(self, opts):
        import click

        with pytest.raises(click.BadParameter):
            parse_scenario_opts(opts)
