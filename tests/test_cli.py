"""Tests for the command-line entry point."""

import orjson
import pytest

from scalp_advisor.__main__ import main


def _inputs(n: int = 30, position: dict | None = None) -> dict:
    candles = [
        {
            "timestamp": 1_700_000_000_000 + i * 60_000,
            "open": 100.0 + i * 0.2,
            "high": 101.0 + i * 0.2,
            "low": 99.0 + i * 0.2,
            "close": 100.5 + i * 0.2,
            "volume": 500.0,
        }
        for i in range(n)
    ]
    return {
        "candles": candles,
        "position": position,
        "sentiment": {"value": 40, "classification": "Fear"},
    }


@pytest.fixture
def no_config(tmp_path):
    """Path to a config file that does not exist, so defaults apply."""
    return str(tmp_path / "missing.yaml")


class TestMain:
    def test_prints_snapshot(self, tmp_path, no_config, capsys):
        path = tmp_path / "inputs.json"
        path.write_bytes(orjson.dumps(_inputs()))

        code = main([str(path), "--config", no_config])

        assert code == 0
        snapshot = orjson.loads(capsys.readouterr().out)
        assert snapshot["recommendation"]["action"] in {"open_long", "open_short", "wait"}
        assert snapshot["recommendation"]["reasons"]
        assert snapshot["market_context"]["sentiment_value"] == 40
        assert snapshot["holdability"] is None

    def test_compact_with_position(self, tmp_path, no_config, capsys):
        path = tmp_path / "inputs.json"
        position = {"side": "short", "entry_price": 90.0, "liquidation_price": 120.0}
        path.write_bytes(orjson.dumps(_inputs(position=position)))

        code = main([str(path), "--config", no_config, "--compact"])

        assert code == 0
        out = capsys.readouterr().out
        assert out.count("\n") == 1
        snapshot = orjson.loads(out)
        assert snapshot["recommendation"]["action"] in {"hold", "close"}
        assert snapshot["holdability"]["details"]

    def test_invalid_json_returns_2(self, tmp_path, no_config):
        path = tmp_path / "inputs.json"
        path.write_text("{not json")
        assert main([str(path), "--config", no_config]) == 2

    def test_invalid_candle_returns_2(self, tmp_path, no_config):
        data = _inputs(n=2)
        data["candles"][0]["close"] = "abc"
        path = tmp_path / "inputs.json"
        path.write_bytes(orjson.dumps(data))
        assert main([str(path), "--config", no_config]) == 2

    def test_missing_file_returns_2(self, tmp_path, no_config):
        assert main([str(tmp_path / "nope.json"), "--config", no_config]) == 2

    def test_invalid_config_returns_2(self, tmp_path):
        config_path = tmp_path / "advisor.yaml"
        config_path.write_text("recommendation:\n  close_threshold: 9\n")
        path = tmp_path / "inputs.json"
        path.write_bytes(orjson.dumps(_inputs()))

        assert main([str(path), "--config", str(config_path)]) == 2
