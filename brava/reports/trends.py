# brava/reports/trends.py
"""Chart series for the reports page."""
from datetime import datetime
from typing import Dict, List

from brava.sensors import mock_data
from brava.sensors.metrics import summarize_history
from brava.sensors.types import ScanResult

RANGES = {
    "daily": mock_data.daily_trend,
    "weekly": mock_data.weekly_trend,
    "monthly": mock_data.monthly_trend,
}


def _short_date(ts: str) -> str:
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
        return f"{dt:%b} {dt.day}"
    except ValueError:
        return ts


def scan_trend_series(scans: List[ScanResult]) -> Dict[str, list]:
    """Oldest-first series over the scan history."""
    ordered = sorted(scans, key=lambda s: s.timestamp)
    return {
        "labels": [_short_date(s.timestamp) for s in ordered],
        "timestamps": [s.timestamp for s in ordered],
        "temperature": [s.readings.temperature for s in ordered],
        "ultrasound": [s.readings.ultrasound for s in ordered],
        "bioimpedance": [s.readings.bioimpedance for s in ordered],
        "high_risk": [s.readings.ultrasound >= mock_data.HIGH_RISK_ULTRASOUND_MM for s in ordered],
    }


def history_series(range_name: str = "weekly", rng=None) -> Dict:
    if range_name not in RANGES:
        raise ValueError(f"range must be one of: {', '.join(RANGES)}")
    history = RANGES[range_name](rng=rng)
    return {
        "range": range_name,
        "labels": [h.date for h in history],
        "avg_differential": [h.avg_differential for h in history],
        "peak_asymmetry": [h.peak_asymmetry for h in history],
        "volatility": [h.volatility for h in history],
        "alerts": [h.alerts for h in history],
        "summary": summarize_history(history),
    }
