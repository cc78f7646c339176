# brava/sensors/mock_data.py
"""
Synthetic sensor data for the dashboard, scans and reports.

Every generator takes an optional ``numpy.random.Generator`` so callers (and
tests) can pin the output; without one a fresh unseeded generator is used.
"""
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

import numpy as np

from brava import config
from brava.sensors.metrics import annotate_statuses
from brava.sensors.types import (
    POSITIONS,
    FamilyContact,
    HistoricalData,
    ScanReadings,
    ScanResult,
    SensorReading,
    User,
)

BASE_TEMP_C = 36.5
HIGH_RISK_ULTRASOUND_MM = 0.7


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def _now_iso(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds")


def generate_sensor_readings(
    is_anomaly: bool = False,
    rng: Optional[np.random.Generator] = None,
    now: Optional[datetime] = None,
    threshold: float = config.DEFAULT_THRESHOLD,
) -> List[SensorReading]:
    """Eight paired thermal readings, left and right over positions A..D."""
    rng = _rng(rng)
    ts = _now_iso(now)
    hot_position = POSITIONS[int(rng.integers(len(POSITIONS)))] if is_anomaly else None

    readings = []
    for side in ("left", "right"):
        for pos in POSITIONS:
            temp = BASE_TEMP_C + (rng.random() - 0.5) * 0.8
            if side == "right" and pos == hot_position:
                temp += 1.8 + rng.random() * 0.5
            readings.append(SensorReading(
                side=side,
                position=pos,
                temperature=round(float(temp), 2),
                timestamp=ts,
            ))
    return annotate_statuses(readings, threshold)


def generate_scan_readings(is_anomaly: bool = False, rng: Optional[np.random.Generator] = None) -> ScanReadings:
    rng = _rng(rng)
    temperature = BASE_TEMP_C + (rng.random() - 0.5) * 0.8
    bioimpedance = 500 + (rng.random() - 0.5) * 50
    ultrasound = rng.random() * 0.5

    if is_anomaly:
        temperature += 1.8 + rng.random() * 0.5
        # lower impedance and denser tissue both point the same way
        bioimpedance -= 100 + rng.random() * 50
        ultrasound += 0.4 + rng.random() * 0.2

    return ScanReadings(
        temperature=round(float(temperature), 2),
        bioimpedance=round(float(bioimpedance), 2),
        ultrasound=round(float(ultrasound), 2),
    )


def calculate_risk(readings: ScanReadings) -> str:
    return "High" if readings.ultrasound >= HIGH_RISK_ULTRASOUND_MM else "Low"


def generate_new_scan(
    is_anomaly: bool = False,
    now: Optional[datetime] = None,
    rng: Optional[np.random.Generator] = None,
) -> ScanResult:
    now = now or datetime.now(timezone.utc)
    readings = generate_scan_readings(is_anomaly, rng=rng)
    return ScanResult(
        # unique even for two scans in the same millisecond
        id=f"scan_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:6]}",
        timestamp=_now_iso(now),
        readings=readings,
        risk=calculate_risk(readings),
    )


def generate_historical_data(
    days: int,
    today: Optional[date] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[HistoricalData]:
    """One aggregate per day for the last ``days`` days, oldest first."""
    rng = _rng(rng)
    today = today or date.today()
    data = []
    for i in range(days):
        day = today - timedelta(days=i)
        avg_differential = rng.random() * 1.2
        peak_asymmetry = avg_differential + rng.random() * 0.8
        volatility = rng.random() * 0.5
        data.append(HistoricalData(
            date=day.strftime("%Y-%m-%d"),
            avg_differential=round(float(avg_differential), 2),
            peak_asymmetry=round(float(peak_asymmetry), 2),
            volatility=round(float(volatility), 2),
            alerts=1 if rng.random() > 0.8 else 0,
        ))
    data.reverse()
    return data


def daily_trend(rng: Optional[np.random.Generator] = None) -> List[HistoricalData]:
    hours = generate_historical_data(24, rng=rng)
    return [h.model_copy(update={"date": f"{i}:00"}) for i, h in enumerate(hours)]


def weekly_trend(rng: Optional[np.random.Generator] = None) -> List[HistoricalData]:
    return generate_historical_data(7, rng=rng)


def monthly_trend(rng: Optional[np.random.Generator] = None) -> List[HistoricalData]:
    return generate_historical_data(30, rng=rng)


# --------------- Demo profile ---------------
def mock_user() -> User:
    return User(
        id=config.DEFAULT_USER_ID,
        name="Jennifer",
        email="jennifer@example.com",
        age=34,
        weight=65,
        medical_history="No prior breast conditions reported.",
        threshold=config.DEFAULT_THRESHOLD,
        paired_device_id="BRAVA-001",
        avatar_url="https://picsum.photos/seed/user-avatar/100/100",
        family_contacts=[
            FamilyContact(id="contact-1", name="Michael Smith", relationship="Husband",
                          phone="555-123-4567", email="michael@example.com"),
            FamilyContact(id="contact-2", name="Sarah Johnson", relationship="Sister",
                          phone="555-987-6543", email="sarah@example.com"),
        ],
    )


def mock_doctors() -> List[dict]:
    return [
        {"id": 1, "name": "Dr. Evelyn Reed", "specialty": "Oncology Specialist",
         "hospital": "Unity Health Medical Center",
         "avatar_url": "https://picsum.photos/seed/doctor1/100/100"},
        {"id": 2, "name": "Dr. Ben Carter", "specialty": "General Practitioner",
         "hospital": "City Health Clinic",
         "avatar_url": "https://picsum.photos/seed/doctor2/100/100"},
        {"id": 3, "name": "Dr. Olivia Chen", "specialty": "Radiologist",
         "hospital": "St. Jude's Hospital",
         "avatar_url": "https://picsum.photos/seed/doctor3/100/100"},
    ]
