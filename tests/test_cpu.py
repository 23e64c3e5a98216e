import pytest

from myaku.cpu import CpuMetrics
from myaku.platform import CpuInfo


def sample_cpu_info():
    return CpuInfo(
        per_core=[10.0, 20.0, 30.0, 40.0],
        total=25.0,
        brand="Apple M1",
        core_count=4,
    )


def test_initial_state():
    cpu = CpuMetrics(4, 60)
    assert cpu.total_usage() == 0.0
    assert cpu.core_count == 4


def test_update_records_data():
    cpu = CpuMetrics(4, 60)
    cpu.update(sample_cpu_info())
    assert cpu.total_usage() == pytest.approx(25.0)
    assert cpu.brand == "Apple M1"


def test_sparklines_generated():
    cpu = CpuMetrics(4, 60)
    cpu.update(sample_cpu_info())
    sparks = cpu.sparklines((1.0, 0.0, 0.0, 1.0))
    assert len(sparks) == 4
    assert sparks[0].current == pytest.approx(10.0)
    assert [s.label for s in sparks] == ["Core 0", "Core 1", "Core 2", "Core 3"]


def test_total_sparkline():
    cpu = CpuMetrics(4, 60)
    cpu.update(sample_cpu_info())
    spark = cpu.total_sparkline((0.0, 0.0, 1.0, 1.0))
    assert spark.label == "CPU Total"
    assert spark.current == pytest.approx(25.0)
    assert spark.points == [pytest.approx(0.25)]


def test_update_resizes_on_core_change():
    cpu = CpuMetrics(2, 60)
    cpu.update(sample_cpu_info())
    assert len(cpu.cores.series) == 4
    assert cpu.cores.series[3][1].latest() == pytest.approx(40.0)
    assert cpu.cores.series[0][1].capacity() == 60
    assert cpu.core_count == 4


def test_history_capped():
    cpu = CpuMetrics(4, 3)
    for _ in range(5):
        cpu.update(sample_cpu_info())
    assert len(cpu.cores.summary) == 3


def test_zero_history_rejected():
    with pytest.raises(ValueError):
        CpuMetrics(4, 0)