"""
Performance Logger Service

Tracks and logs performance metrics for the decoder pipeline.
Records per-stage times (load, localize, decode, parse, derive) of each
scan and the rolling scan rate of the live feed.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, Optional, Callable


logger = logging.getLogger(__name__)


# Stage names in pipeline order
TIMED_STAGES = ("load", "localize", "decode", "parse", "derive")


@dataclass
class ScanTiming:
    """
    Stores timing information for a single scan attempt.
    All times are in milliseconds.
    """
    loadMs: float = 0.0
    localizeMs: float = 0.0
    decodeMs: float = 0.0
    parseMs: float = 0.0
    deriveMs: float = 0.0
    totalMs: float = 0.0
    scansPerSecond: float = 0.0

    def __repr__(self) -> str:
        return (
            f"load={self.loadMs:.1f}ms, "
            f"localize={self.localizeMs:.1f}ms, "
            f"decode={self.decodeMs:.1f}ms, "
            f"parse={self.parseMs:.1f}ms, "
            f"derive={self.deriveMs:.1f}ms | "
            f"Total={self.totalMs:.1f}ms | "
            f"Rate={self.scansPerSecond:.1f}/s"
        )


class PerformanceLogger:
    """
    Performance logging service for the decoder pipeline.

    Features:
    - Tracks timing for each pipeline stage
    - Calculates rolling average scan rate
    - Logs performance metrics at configurable intervals
    - Supports callback for UI updates

    Follows SRP: Only handles performance measurement and logging.
    """

    def __init__(
        self,
        enabled: bool = True,
        logInterval: int = 1,
        rollingWindowSize: int = 30,
        onUpdate: Optional[Callable[[ScanTiming], None]] = None
    ):
        """
        Initialize PerformanceLogger.

        Args:
            enabled: Enable/disable performance logging.
            logInterval: Log every N scans (0 = don't log to console).
            rollingWindowSize: Number of scans for the rolling average.
            onUpdate: Callback function called with ScanTiming after each scan.
        """
        self._enabled = enabled
        self._logInterval = logInterval
        self._onUpdate = onUpdate

        self._recentTimes: deque = deque(maxlen=rollingWindowSize)
        self._scanCount = 0
        self._currentTiming = ScanTiming()

    @property
    def enabled(self) -> bool:
        """Check if performance logging is enabled."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        """Enable or disable performance logging."""
        self._enabled = value

    def recordTiming(self, timing: Dict[str, float], frameId: str = "") -> ScanTiming:
        """
        Record the stage times of one scan.

        Expected keys: load, localize, decode, parse, derive (missing
        stages count as 0; a scan that stopped early has fewer keys).

        Args:
            timing: Dictionary with stage times in milliseconds.
            frameId: Frame identifier for the log line.

        Returns:
            ScanTiming with all recorded metrics.
        """
        if not self._enabled:
            return ScanTiming()

        self._currentTiming = ScanTiming(
            loadMs=timing.get("load", 0.0),
            localizeMs=timing.get("localize", 0.0),
            decodeMs=timing.get("decode", 0.0),
            parseMs=timing.get("parse", 0.0),
            deriveMs=timing.get("derive", 0.0)
        )
        totalMs = sum(timing.get(stage, 0.0) for stage in TIMED_STAGES)
        self._currentTiming.totalMs = totalMs

        self._recentTimes.append(totalMs)
        self._currentTiming.scansPerSecond = self.getAverageRate()

        self._scanCount += 1

        if self._logInterval > 0 and self._scanCount % self._logInterval == 0:
            prefix = f"[{frameId}] " if frameId else ""
            logger.info(f"{prefix}Performance: {self._currentTiming}")

        if self._onUpdate:
            self._onUpdate(self._currentTiming)

        return self._currentTiming

    def getAverageRate(self) -> float:
        """
        Get the rolling average number of scans per second.

        Returns:
            Average rate over the rolling window.
        """
        if len(self._recentTimes) == 0:
            return 0.0

        avgMs = sum(self._recentTimes) / len(self._recentTimes)
        return 1000.0 / avgMs if avgMs > 0 else 0.0

    def getTotalTime(self) -> float:
        """
        Get the average total time per scan in milliseconds.

        Returns:
            Average total time over the rolling window.
        """
        if len(self._recentTimes) == 0:
            return 0.0
        return sum(self._recentTimes) / len(self._recentTimes)

    def getLastTiming(self) -> ScanTiming:
        """
        Get the timing info from the last scan.

        Returns:
            ScanTiming from the most recent scan.
        """
        return self._currentTiming

    def getScanCount(self) -> int:
        """Number of scans recorded since the last reset."""
        return self._scanCount

    def reset(self) -> None:
        """Reset all counters and timing data."""
        self._recentTimes.clear()
        self._scanCount = 0
        self._currentTiming = ScanTiming()
