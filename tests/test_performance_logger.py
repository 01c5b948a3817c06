import pytest

from services.performance_logger import PerformanceLogger, ScanTiming


def test_records_stage_times_and_total():
    updates = []
    logger = PerformanceLogger(onUpdate=updates.append)

    timing = logger.recordTiming({"localize": 30.0, "decode": 5.0, "parse": 10.0, "derive": 5.0})

    assert timing.localizeMs == 30.0
    assert timing.loadMs == 0.0
    assert timing.totalMs == pytest.approx(50.0)
    assert timing.scansPerSecond == pytest.approx(20.0)
    assert updates == [timing]
    assert logger.getScanCount() == 1


def test_rolling_average_uses_recent_scans():
    logger = PerformanceLogger(rollingWindowSize=2)

    logger.recordTiming({"decode": 100.0})
    logger.recordTiming({"decode": 50.0})
    logger.recordTiming({"decode": 150.0})

    assert logger.getTotalTime() == pytest.approx(100.0)
    assert logger.getAverageRate() == pytest.approx(10.0)


def test_disabled_logger_records_nothing():
    logger = PerformanceLogger(enabled=False)

    assert logger.recordTiming({"decode": 10.0}) == ScanTiming()
    assert logger.getScanCount() == 0
    assert logger.getAverageRate() == 0.0


def test_reset_clears_history():
    logger = PerformanceLogger()
    logger.recordTiming({"parse": 4.0})

    logger.reset()

    assert logger.getScanCount() == 0
    assert logger.getLastTiming() == ScanTiming()
