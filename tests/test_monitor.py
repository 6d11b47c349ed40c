"""Tests for status display and the monitoring loop."""

import asyncio
import io
from decimal import Decimal

import pytest
from rich.console import Console

from nano_status.netstatus.errors import FetchError
from nano_status.netstatus.monitor import (
    StatusMonitor,
    display_delegators,
    display_network_status,
    format_number,
    format_percent,
    format_uptime,
)
from nano_status.netstatus.snapshot import Snapshot

from conftest import FakeMetricsClient


def make_console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


class TestFormatting:
    """Tests for number formatting helpers."""

    @pytest.mark.parametrize(
        "value,precision,expected",
        [
            (0, 0, "0"),
            (1234567, 0, "1,234,567"),
            (Decimal("1234.5"), 0, "1,235"),
            (Decimal("30000"), 0, "30,000"),
            (Decimal("0.5"), 6, "0.500000"),
            (Decimal("1234.1234565"), 6, "1,234.123457"),
            (2.25, 1, "2.3"),
        ],
    )
    def test_format_number(self, value, precision, expected):
        assert format_number(value, precision) == expected

    def test_format_percent(self):
        assert format_percent(Decimal("50")) == "50.00%"
        assert format_percent(Decimal("0.02")) == "0.02%"

    def test_unavailable_percent(self):
        assert format_percent(None) == "N/A"

    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0.4, "0s"),
            (5, "5s"),
            (125, "2m05s"),
            (3725, "1h02m"),
            (90061, "1d 1h"),
        ],
    )
    def test_format_uptime(self, seconds, expected):
        assert format_uptime(seconds) == expected


class TestDisplayNetworkStatus:
    """Tests for the status rendering."""

    def test_renders_summary_and_tables(self, sample_snapshot):
        target, buffer = make_console()

        display_network_status(sample_snapshot, target)
        output = buffer.getvalue()

        assert "2 representatives online" in output
        assert "1 representatives rebroadcasting votes" in output
        assert "30,000 NANO" in output
        assert "0.02%" in output
        assert "15,000 NANO" in output
        assert "50.00%" in output
        assert "Block Stats" in output
        assert "105" in output
        assert "Peer Versions (3 peers)" in output
        assert "66.67%" in output

    def test_no_online_weight_renders_unavailable(self):
        target, buffer = make_console()
        snapshot = Snapshot.from_results({}, {}, {}, {"A": "15000"})

        display_network_status(snapshot, target)
        output = buffer.getvalue()

        assert "N/A" in output
        assert "NaN" not in output
        assert "0 representatives online" in output


class TestDisplayDelegators:
    """Tests for the delegator listing."""

    def test_lists_largest_first_with_six_decimals(self):
        target, buffer = make_console()

        display_delegators(
            "nano_1rep",
            {"nano_1small": "0.5", "nano_1big": "1234.1234565", "nano_1bad": "x"},
            target,
        )
        output = buffer.getvalue()

        assert output.index("nano_1big") < output.index("nano_1small")
        assert "1,234.123457 NANO" in output
        assert "0.500000 NANO" in output
        assert "nano_1bad" not in output
        assert "2 delegators" in output


class TestStatusMonitor:
    """Tests for the monitoring loop."""

    def test_renders_each_published_snapshot(self, fake_client):
        target, buffer = make_console()
        monitor = StatusMonitor(fake_client, interval=0.01, target=target)

        renders = asyncio.run(monitor.monitor(max_renders=2))

        assert renders == 2
        assert buffer.getvalue().count("Network Status -") == 2
        assert not monitor.aggregator.running

    def test_failed_polls_are_not_rendered(self):
        client = FakeMetricsClient()
        client.failures["peers"] = FetchError("down")
        target, buffer = make_console()
        monitor = StatusMonitor(client, interval=0.01, target=target)

        async def scenario():
            task = asyncio.create_task(monitor.monitor())
            while client.cycles < 2:
                await asyncio.sleep(0.005)
            client.failures.clear()
            await asyncio.wait_for(_until_rendered(monitor), timeout=2.0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

        assert monitor.renders >= 1
        assert not monitor.aggregator.running


async def _until_rendered(monitor: StatusMonitor) -> None:
    while monitor.renders == 0:
        await asyncio.sleep(0.005)
