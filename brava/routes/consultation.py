# brava/routes/consultation.py
from flask import Blueprint, request

from brava.routes.common import load_user, readings_from, run_health_tips, user_id_from
from brava.sensors.mock_data import mock_doctors

consultation_bp = Blueprint("consultation", __name__)


@consultation_bp.route("/tips", methods=["POST"])
def tips():
    """
    Input JSON: { "user_id": "demo" }
    Output JSON: { "ok": true, "health_tips": [...], "educational_content": "...", "fallback": false }
    """
    body = request.get_json(force=True, silent=True) or {}
    user, err = load_user(user_id_from(body))
    if err:
        return err
    try:
        return run_health_tips(user, readings_from(body, user))
    except ValueError as e:
        return {"ok": False, "error": str(e)}, 400


@consultation_bp.route("/doctors", methods=["GET"])
def doctors():
    return {"doctors": mock_doctors()}
