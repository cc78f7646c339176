# brava/routes/live.py
from flask import Blueprint, request

from brava.routes.common import flag, load_user, user_id_from
from brava.sensors.metrics import calculate_metrics, has_alert
from brava.sensors.mock_data import generate_sensor_readings

live_bp = Blueprint("live", __name__)


def live_snapshot(user, anomaly: bool = False, readings=None) -> dict:
    if readings is None:
        readings = generate_sensor_readings(anomaly, threshold=user.threshold)
    metrics = calculate_metrics(readings, user.threshold)
    alert = has_alert(metrics, user.threshold)
    return {
        "user": {"id": user.id, "name": user.name, "threshold": user.threshold},
        "readings": [r.model_dump() for r in readings],
        "metrics": metrics.model_dump(),
        "alert": {
            "active": alert,
            "message": (
                f"A temperature differential of {metrics.peak_asymmetry:.2f}°C has exceeded your threshold. "
                "Please run the AI analysis."
            ) if alert else "",
        },
    }


@live_bp.route("/live", methods=["GET"])
def live():
    """
    Query: ?user_id=demo&anomaly=1
    Output JSON: { "user": {...}, "readings": [...], "metrics": {...}, "alert": {...} }
    """
    user, err = load_user(user_id_from(request.args))
    if err:
        return err
    return live_snapshot(user, flag(request.args.get("anomaly")))
