"""Tests for the click command line interface."""

import json
import sys

import pytest
from click.testing import CliRunner

from termmax_tools.cli.__main__ import cli, main

from conftest import (
    BASE_TIMESTAMP,
    CALLER,
    DAY,
    DEBT,
    ORDER,
    XT,
    FakeLedgerClient,
    make_log,
    market_calls,
)
from test_converter import V1_ROW, write_sheet
from test_loadtest import FakeSession
from termmax_tools.deploy import SCHEMA_V1


def build_ledger(**kwargs):
    logs = [
        make_log("OrderInitialized", 10, 0, maker=CALLER, maxXtReserve=3_000_000),
        make_log("UpdateOrder", 11, 0, ftChangeAmt=2_000_000, xtChangeAmt=0),
        make_log("SwapExactTokenToToken", 12, 0, tokenIn=DEBT, tokenOut=XT, caller=CALLER,
                 recipient=CALLER, tokenAmtIn=1000, netTokenOut=900, feeAmt=10),
    ]
    timestamps = {block: BASE_TIMESTAMP + block * DAY for block in (10, 11, 12)}
    return FakeLedgerClient(logs=logs, timestamps=timestamps, calls=market_calls(), head=100, **kwargs)


@pytest.fixture
def runner():
    return CliRunner()


class TestOrderHistoryCommand:

    def test_prints_history_and_exports(self, runner):
        client = build_ledger()
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["order-history", ORDER, "https://rpc.example", "--show-details",
                 "--output-file", "--csv-file", "history.csv"],
                obj={"client_factory": lambda rpc: client},
            )

            assert result.exit_code == 0, result.output
            assert "--- Order History (showing 3 of 3 events) ---" in result.output
            assert "--- Detailed Event View ---" in result.output
            assert "Results saved to order-history.json" in result.output
            assert "CSV order history exported to history.csv" in result.output
            assert "Total Events: 3" in result.output

            with open("order-history.json") as f:
                document = json.load(f)
            assert len(document["all"]) == 3
            with open("history.csv") as f:
                rows = f.read().splitlines()
            assert rows[1].startswith("2023-11-24,10,Create,CREATE,3.0")

        assert client.closed

    def test_limit(self, runner):
        client = build_ledger()
        result = runner.invoke(cli, ["order-history", ORDER, "https://rpc.example", "--limit", "1"],
                               obj={"client_factory": lambda rpc: client})

        assert result.exit_code == 0, result.output
        assert "showing 1 of 3 events" in result.output
        assert "... and 2 more events" in result.output

    @pytest.mark.parametrize("limit", ["0", "-1"])
    def test_limit_must_be_positive(self, runner, limit):
        client = build_ledger()
        result = runner.invoke(cli, ["order-history", ORDER, "https://rpc.example", "--limit", limit],
                               obj={"client_factory": lambda rpc: client})

        assert result.exit_code == 2
        assert "Invalid value for '--limit'" in result.output
        assert client.log_queries == []

    def test_failure_exits_with_status_1(self, runner):
        def broken_factory(rpc):
            raise ConnectionError("connection refused")

        result = runner.invoke(cli, ["order-history", ORDER, "https://rpc.example"],
                               obj={"client_factory": broken_factory})

        assert result.exit_code == 1
        assert "Error tracking order history: connection refused" in result.output


class TestConvertCommand:

    def test_converts_sheet(self, runner, tmp_path):
        sheet = write_sheet(tmp_path / "markets.csv", SCHEMA_V1, [V1_ROW, dict(V1_ROW, salt="8")])
        output = tmp_path / "deploy.json"

        result = runner.invoke(cli, ["convert-configs", str(sheet), str(output)])

        assert result.exit_code == 0, result.output
        assert f"Converted 2 market configs to {output}" in result.output
        assert json.loads(output.read_text())["configNum"] == "2"

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(cli, ["convert-configs", str(tmp_path / "nope.csv"), str(tmp_path / "out.json")])

        assert result.exit_code == 1
        assert "Could not read" in result.output

    def test_rejects_unknown_schema(self, runner, tmp_path):
        result = runner.invoke(cli, ["convert-configs", "a.csv", "b.json", "--schema", "v3"])

        assert result.exit_code == 2


class TestAbiCommands:

    def test_topics(self, runner):
        result = runner.invoke(cli, ["abi", "topics", "TermMaxOrder"])

        assert result.exit_code == 0, result.output
        line = next(l for l in result.output.splitlines() if l.startswith("UpdateOrder "))
        name, signature, topic = line.split(" ")
        assert signature.startswith("UpdateOrder(")
        assert topic.startswith("0x") and len(topic) == 66

    def test_unknown_contract(self, runner):
        result = runner.invoke(cli, ["abi", "topics", "NoSuchContract"])

        assert result.exit_code == 1
        assert "ABI not found: NoSuchContract" in result.output
        assert "TermMaxOrder" in result.output

    def test_extract(self, runner, tmp_path):
        artifact = tmp_path / "Sample.json"
        artifact.write_text(json.dumps({"contractName": "Sample", "abi": [
            {"type": "event", "name": "Ping", "anonymous": False,
             "inputs": [{"name": "value", "type": "uint256", "indexed": False}]},
        ]}))

        result = runner.invoke(cli, ["abi", "extract", str(artifact), "--out-dir", str(tmp_path / "abis")])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "abis" / "Sample.json").exists()


class TestLoadtestCommand:

    def test_functional_pass(self, runner):
        session = FakeSession()

        result = runner.invoke(cli, ["loadtest", "--functional-only"], obj={"http_session": session})

        assert result.exit_code == 0, result.output
        assert "Load testing dev" in result.output
        assert "✓ checks" in result.output
        assert session.urls[0].startswith("https://termmax-backend-v2-test.onrender.com/")

    def test_failed_thresholds_exit_1(self, runner):
        session = FakeSession(failing={"/", "/health", "/market/config/market/list"})

        result = runner.invoke(cli, ["loadtest", "--functional-only"], obj={"http_session": session})

        assert result.exit_code == 1
        assert "✗ http_req_failed" in result.output


class TestMain:

    def test_usage_error_exits_1(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["termmax-tools", "order-history"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1

    def test_help_exits_0(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["termmax-tools", "--help"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
