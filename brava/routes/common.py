# brava/routes/common.py
"""
Helpers shared by the JSON API and the server-rendered pages: user lookup,
flag parsing and the three AI flows with their fallbacks.
"""
import logging
from typing import List, Optional

from pydantic import ValidationError

from brava import config
from brava.flows.base import safe_run
from brava.flows.diagnose_risk import diagnose_risk_flow, fallback_assessment
from brava.flows.health_tips import fallback_tips, health_tips_flow
from brava.flows.notify import notify_family_contacts
from brava.flows.report_summary import readings_for_summary, report_summary_flow
from brava.sensors.metrics import calculate_metrics
from brava.sensors.mock_data import generate_sensor_readings
from brava.sensors.types import SensorReading, User
from brava.store import profile as profile_store

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}


def flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY


def user_id_from(data: Optional[dict]) -> str:
    return str((data or {}).get("user_id") or config.DEFAULT_USER_ID)


def load_user(user_id: str):
    """Returns (user, error_response); exactly one is None."""
    user = profile_store.get_user(user_id)
    if user is None:
        return None, ({"ok": False, "error": f"Unknown user {user_id}"}, 404)
    return user, None


def readings_from(body: dict, user: User) -> List[SensorReading]:
    """
    Readings supplied in the request body, or a fresh mock set.
    Raises ValueError when supplied readings don't validate.
    """
    supplied = body.get("sensor_readings")
    if supplied is None:
        return generate_sensor_readings(flag(body.get("anomaly")), threshold=user.threshold)
    if not isinstance(supplied, list) or not supplied:
        raise ValueError("sensor_readings must be a non-empty list")
    try:
        return [SensorReading.model_validate(r) for r in supplied]
    except ValidationError as e:
        raise ValueError(f"Invalid sensor_readings: {e}") from e


def _flow_readings(readings: List[SensorReading]) -> List[dict]:
    return [r.model_dump(include={"side", "position", "temperature", "timestamp"}) for r in readings]


# --------------- Risk analysis ---------------
def family_alert(notices: List[dict]) -> dict:
    """Banner for the notices that were actually sent."""
    if not notices:
        return {"triggered": False, "contacts": [], "message": "", "notices": []}
    names = [n["name"] for n in notices]
    return {
        "triggered": True,
        "contacts": names,
        "message": f"{' and '.join(names)} have been notified of this high-risk result.",
        "notices": notices,
    }


def run_risk_analysis(user: User, readings: List[SensorReading]) -> dict:
    metrics = calculate_metrics(readings, user.threshold)
    result, unavail = safe_run(diagnose_risk_flow, {
        "sensor_readings": _flow_readings(readings),
        "user": user.model_dump(),
    })
    if unavail or result is None:
        output = fallback_assessment(metrics, user.threshold)
        # the flow notifies on success; do the same for the rule-based answer
        notices = notify_family_contacts(user, output.risk_level, output.summary)
    else:
        output, notices = result, result.notices

    return {
        "ok": True,
        "readings": [r.model_dump() for r in readings],
        "metrics": metrics.model_dump(),
        "analysis": output.model_dump(include={"risk_level", "summary", "recommendation"}),
        "fallback": bool(unavail),
        "family_alert": family_alert(notices),
    }


# --------------- Report summary ---------------
def run_report_summary(user: User, readings: List[SensorReading]) -> dict:
    output, unavail = safe_run(report_summary_flow, {
        "sensor_readings": readings_for_summary(readings),
        "user_medical_history": user.medical_history or None,
        "threshold": user.threshold,
    })
    if unavail or output is None:
        m = calculate_metrics(readings, user.threshold)
        summary = (
            f"Report summary temporarily unavailable. Latest readings: peak asymmetry "
            f"{m.peak_asymmetry:.2f}°C, average differential {m.avg_differential:.2f}°C "
            f"against a {user.threshold:.1f}°C threshold."
        )
        return {"ok": True, "summary": summary, "fallback": True}
    return {"ok": True, "summary": output.summary, "fallback": False}


# --------------- Health tips ---------------
def run_health_tips(user: User, readings: List[SensorReading]) -> dict:
    output, unavail = safe_run(health_tips_flow, {
        "sensor_readings": _flow_readings(readings),
        "user": user.model_dump(),
    })
    if unavail or output is None:
        output = fallback_tips()
    return {"ok": True, **output.model_dump(), "fallback": bool(unavail)}
