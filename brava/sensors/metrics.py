# brava/sensors/metrics.py
from typing import Dict, List

import numpy as np

from brava.sensors.types import Differential, HistoricalData, SensorReading, ThermalMetrics

WARNING_RATIO = 0.7


def classify_differential(diff: float, threshold: float) -> str:
    """
    Status of a single left/right pair:
    alert at or above the threshold, warning from 70% of it, normal below.
    """
    if diff >= threshold:
        return "alert"
    if diff >= threshold * WARNING_RATIO:
        return "warning"
    return "normal"


def _split_sides(readings: List[SensorReading]):
    left = sorted((r for r in readings if r.side == "left"), key=lambda r: r.position)
    right = sorted((r for r in readings if r.side == "right"), key=lambda r: r.position)
    return left, right


def calculate_metrics(readings: List[SensorReading], threshold: float = 1.0) -> ThermalMetrics:
    """
    Average differential, peak asymmetry and volatility over paired readings.

    Pairs are matched by position after sorting each side. Mismatched or empty
    input yields an empty result with all statistics at zero.
    """
    left, right = _split_sides(readings)
    if not left or len(left) != len(right):
        return ThermalMetrics()

    differentials = []
    for lr, rr in zip(left, right):
        diff = abs(lr.temperature - rr.temperature)
        differentials.append(Differential(
            position=lr.position,
            left_temp=lr.temperature,
            right_temp=rr.temperature,
            diff=diff,
            status=classify_differential(diff, threshold),
        ))

    values = np.array([d.diff for d in differentials], dtype=float)
    return ThermalMetrics(
        differentials=differentials,
        avg_differential=float(values.mean()),
        peak_asymmetry=float(values.max()),
        # population std-dev over the pairs
        volatility=float(values.std()),
    )


def has_alert(metrics: ThermalMetrics, threshold: float) -> bool:
    return bool(metrics.differentials) and metrics.peak_asymmetry >= threshold


def annotate_statuses(readings: List[SensorReading], threshold: float) -> List[SensorReading]:
    """Copy each pair's differential status onto both of its readings."""
    by_position = {d.position: d.status for d in calculate_metrics(readings, threshold).differentials}
    return [
        r.model_copy(update={"status": by_position.get(r.position, "normal")})
        for r in readings
    ]


def summarize_history(history: List[HistoricalData]) -> Dict[str, float]:
    if not history:
        return {"days": 0, "avg_differential": 0.0, "max_peak_asymmetry": 0.0,
                "avg_volatility": 0.0, "total_alerts": 0}
    avg = np.array([h.avg_differential for h in history], dtype=float)
    peak = np.array([h.peak_asymmetry for h in history], dtype=float)
    vol = np.array([h.volatility for h in history], dtype=float)
    return {
        "days": len(history),
        "avg_differential": round(float(avg.mean()), 2),
        "max_peak_asymmetry": round(float(peak.max()), 2),
        "avg_volatility": round(float(vol.mean()), 2),
        "total_alerts": int(sum(h.alerts for h in history)),
    }
