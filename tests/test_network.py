import pytest

from myaku.network import InterfaceMetrics, NetworkMetrics, format_rate
from myaku.platform import NetworkInfo


def sample_net_initial():
    return [
        NetworkInfo(interface="en0", rx_bytes=1_000_000, tx_bytes=500_000),
        NetworkInfo(interface="lo0", rx_bytes=100, tx_bytes=100),
    ]


def sample_net_updated():
    return [
        NetworkInfo(interface="en0", rx_bytes=2_000_000, tx_bytes=600_000),
        NetworkInfo(interface="lo0", rx_bytes=200, tx_bytes=200),
    ]


def test_initial_state():
    net = NetworkMetrics(60)
    assert net.interfaces == []


def test_first_update_creates_interfaces():
    net = NetworkMetrics(60)
    net.update(sample_net_initial())
    assert len(net.interfaces) == 2
    assert net.interfaces[0].current_rx() == 0.0


def test_second_update_computes_delta():
    net = NetworkMetrics(60)
    net.update(sample_net_initial())
    net.update(sample_net_updated())
    assert net.interfaces[0].current_rx() == pytest.approx(1_000_000.0, abs=1.0)
    assert net.interfaces[0].current_tx() == pytest.approx(100_000.0, abs=1.0)


def test_format_rate_units():
    assert format_rate(0.0) == "0 B/s"
    assert format_rate(500.0) == "500 B/s"
    assert format_rate(1024.0) == "1.0 KB/s"
    assert format_rate(1_048_576.0) == "1.0 MB/s"
    assert format_rate(1_073_741_824.0) == "1.0 GB/s"


def test_counter_reset_saturates_at_zero():
    iface = InterfaceMetrics(NetworkInfo(interface="en0", rx_bytes=500, tx_bytes=500), 10)
    iface.update(NetworkInfo(interface="en0", rx_bytes=100, tx_bytes=800))
    assert iface.current_rx() == 0.0
    assert iface.current_tx() == 300.0
    assert iface.total_rx == 100


def test_displays():
    net = NetworkMetrics(60)
    net.update(sample_net_initial())
    net.update(sample_net_updated())
    en0 = net.interfaces[0]
    assert en0.rx_display() == "976.6 KB/s"
    assert en0.tx_display() == "97.7 KB/s"


def test_summary_lines_skip_idle_interfaces():
    net = NetworkMetrics(60)
    net.update(sample_net_initial() + [NetworkInfo(interface="idle0", rx_bytes=0, tx_bytes=0)])
    net.update(sample_net_updated())
    lines = net.summary_lines()
    assert len(lines) == 2
    assert lines[1] == "lo0: rx 100 B/s tx 100 B/s"
    assert not any(line.startswith("idle0") for line in lines)


def test_totals_follow_latest_sample():
    net = NetworkMetrics(60)
    net.update(sample_net_initial())
    net.update(sample_net_updated())
    assert net.interfaces[0].total_rx == 2_000_000
    assert net.interfaces[0].total_tx == 600_000
    assert len(net.interfaces[0].rx_history) == 1