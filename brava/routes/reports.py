# brava/routes/reports.py
from flask import Blueprint, request

from brava.reports.trends import history_series, scan_trend_series
from brava.routes.common import load_user, readings_from, run_report_summary, user_id_from
from brava.store import scans as scan_store

reports_bp = Blueprint("reports", __name__)


@reports_bp.route("/trends", methods=["GET"])
def trends():
    try:
        return {"series": history_series(request.args.get("range", "weekly"))}
    except ValueError as e:
        return {"error": str(e)}, 400


@reports_bp.route("/scans", methods=["GET"])
def scan_series():
    scans = scan_store.list_scans(user_id_from(request.args))
    return {"series": scan_trend_series(scans), "count": len(scans)}


@reports_bp.route("/summary", methods=["POST"])
def summary():
    """
    Input JSON: { "user_id": "demo" } (optionally "sensor_readings" or "anomaly")
    Output JSON: { "ok": true, "summary": "...", "fallback": false }
    """
    body = request.get_json(force=True, silent=True) or {}
    user, err = load_user(user_id_from(body))
    if err:
        return err
    try:
        return run_report_summary(user, readings_from(body, user))
    except ValueError as e:
        return {"ok": False, "error": str(e)}, 400
