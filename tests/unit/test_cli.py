"""Test the click CLI end to end on a small trade file."""

import json

import pytest
from click.testing import CliRunner

from tradelog.cli import main

TRADES = [
    {"id": "1", "trade_date": "2024-03-01", "direction": "Long", "trade_outcome": "Win",
     "market": "EURUSD", "risk_per_trade": 1, "risk_reward_ratio": 2, "calculated_profit": 100},
    {"id": "2", "trade_date": "2024-03-04", "direction": "Long", "trade_outcome": "Win",
     "market": "EURUSD", "risk_per_trade": 1, "risk_reward_ratio": 1, "calculated_profit": 50},
    {"id": "3", "trade_date": "2024-03-12", "direction": "Long", "trade_outcome": "Lose",
     "market": "GBPUSD", "risk_per_trade": 1, "calculated_profit": -40},
    {"id": "4", "trade_date": "2024-03-12", "direction": "Short", "trade_outcome": "Win",
     "break_even": True, "market": "GBPUSD"},
    {"id": "5", "trade_date": "2024-03-20", "direction": "Short", "trade_outcome": "Lose",
     "executed": False, "market": "EURUSD", "calculated_profit": -100},
]


@pytest.fixture
def trades_file(tmp_path):
    path = tmp_path / "trades.json"
    path.write_text(json.dumps({"trades": TRADES}), encoding="utf-8")
    return str(path)


def _invoke(*args):
    result = CliRunner().invoke(main, ["--log-level", "ERROR", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestStats:
    def test_by_direction(self, trades_file):
        rows = _invoke("stats", trades_file, "--by", "direction")
        assert [r["group_label"] for r in rows] == ["Long", "Short"]
        assert rows[0]["wins"] == 2
        assert rows[0]["losses"] == 1
        assert rows[1]["be_wins"] == 1
        assert rows[1]["losses"] == 0

    def test_include_all_executions(self, trades_file):
        rows = _invoke("stats", trades_file, "--by", "direction", "--execution", "all")
        assert rows[1]["losses"] == 1

    def test_market_filter(self, trades_file):
        rows = _invoke("stats", trades_file, "--by", "market", "--market", "GBPUSD")
        assert [r["group_label"] for r in rows] == ["GBPUSD"]

    def test_unknown_dimension(self, trades_file):
        result = CliRunner().invoke(main, ["stats", trades_file, "--by", "moon_phase"])
        assert result.exit_code != 0

    def test_missing_file(self, tmp_path):
        result = CliRunner().invoke(main, ["stats", str(tmp_path / "none.json"), "--by", "market"])
        assert result.exit_code == 1
        assert "Cannot read" in result.output


class TestMetrics:
    def test_headline_metrics(self, trades_file):
        data = _invoke("metrics", trades_file)
        assert data["profit_factor"] == 3.75
        assert data["profit_factor_display"] == 3.75
        assert data["total_trades"] == 4
        # distinct dates 1, 4, 12 March
        assert data["average_days_between_trades"] == 5.5
        assert data["average_days_between_trades_display"] == "5.5"

    def test_all_executions_reach_profit_factor(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text(json.dumps([
            {"id": "w", "trade_date": "2024-03-01", "trade_outcome": "Win", "market": "EURUSD",
             "risk_per_trade": 1, "risk_reward_ratio": 2, "calculated_profit": 100},
            {"id": "l", "trade_date": "2024-03-02", "trade_outcome": "Lose", "market": "EURUSD",
             "executed": False, "risk_per_trade": 1, "calculated_profit": -50},
        ]), encoding="utf-8")
        assert _invoke("metrics", str(path))["profit_factor"] == 0.0
        data = _invoke("metrics", str(path), "--execution", "all")
        assert data["losses"] == 1
        assert data["profit_factor"] == 2.0

    def test_drawdown(self, trades_file):
        data = _invoke("metrics", trades_file, "--balance", "10000")
        # 1% risk: +2%, +1%, -1% in date order
        assert data["risk_model_profit"] == 200.0
        assert data["max_drawdown"] == 1.0


class TestRiskReward:
    def test_potential_rr_and_hits(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text(json.dumps([
            {"trade_date": "2024-03-01", "trade_outcome": "Win", "market": "EURUSD",
             "risk_reward_ratio_long": 2.5},
            {"trade_date": "2024-03-02", "trade_outcome": "Lose", "market": "EURUSD",
             "risk_reward_ratio_long": 3, "rr_hit_1_4": True},
        ]), encoding="utf-8")
        data = _invoke("rr", str(path))
        assert [(r["ratio"], r["percentage"]) for r in data["potential_rr"]] == [
            (2.0, 0.0), (2.5, 50.0), (3.0, 50.0),
        ]
        assert data["rr_hit_losses"] == {"EURUSD": 1}


class TestCalendar:
    def test_month(self, trades_file):
        data = _invoke("calendar", trades_file, "--month", "2024-03", "--balance", "1000")
        assert data["month"] == "2024-03-01"
        assert len(data["days"]) == 31
        assert [w["week_label"] for w in data["weeks"]][0] == "1 Mar - 8 Mar"
        assert data["weeks"][0]["total_profit"] == 150.0
        assert data["weeks"][0]["pnl_percent"] == 15.0
        assert data["days"][11]["color"] == "red"

    def test_bad_month(self, trades_file):
        result = CliRunner().invoke(main, ["calendar", trades_file, "--month", "March"])
        assert result.exit_code != 0


class TestPreset:
    def test_resolve(self):
        data = _invoke("preset", "30days", "--today", "2024-03-15")
        assert data == {"preset": "30days", "start_date": "2024-02-15", "end_date": "2024-03-15"}

    def test_unknown(self):
        result = CliRunner().invoke(main, ["preset", "quarter"])
        assert result.exit_code != 0
