# brava/routes/analysis.py
from flask import Blueprint, request

from brava.routes.common import load_user, readings_from, run_risk_analysis, user_id_from

analysis_bp = Blueprint("analysis", __name__)


@analysis_bp.route("/risk", methods=["POST"])
def risk():
    """
    Input JSON: { "user_id": "demo", "anomaly": false } or { "user_id": "demo", "sensor_readings": [...] }
    Output JSON: { "ok": true, "analysis": {risk_level, summary, recommendation}, "family_alert": {...}, ... }
    """
    body = request.get_json(force=True, silent=True) or {}
    user, err = load_user(user_id_from(body))
    if err:
        return err

    # FlowInputError is a ValueError too
    try:
        return run_risk_analysis(user, readings_from(body, user))
    except ValueError as e:
        return {"ok": False, "error": str(e)}, 400
