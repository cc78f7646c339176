# brava/routes/scans.py
import logging

from flask import Blueprint, Response, request
from mysql.connector import Error as MySQLError

from brava.reports.export import CSV_FILENAME, scans_to_csv
from brava.routes.common import flag, load_user, user_id_from
from brava.sensors.mock_data import generate_new_scan
from brava.store import scans as scan_store

logger = logging.getLogger(__name__)

scans_bp = Blueprint("scans", __name__)


def scan_message(risk: str) -> dict:
    if risk == "High":
        return {
            "headline": "High Risk Detected",
            "detail": "Your scan indicates unusual readings. We recommend reviewing the report and consulting a specialist.",
        }
    return {
        "headline": "Low Risk",
        "detail": "Your scan appears normal. Continue with regular monitoring.",
    }


def perform_scan(user_id: str, anomaly: bool):
    scan = generate_new_scan(anomaly)
    scan_store.add_scan(user_id, scan)
    return scan


@scans_bp.route("", methods=["POST"])
def new_scan():
    """
    Input JSON: { "user_id": "demo", "anomaly": false }
    Output JSON: { "ok": true, "scan": {...}, "message": "Risk level identified as Low.", ... }
    """
    body = request.get_json(force=True, silent=True) or {}
    user_id = user_id_from(body)
    user, err = load_user(user_id)
    if err:
        return err

    try:
        scan = perform_scan(user.id, flag(body.get("anomaly")))
    except MySQLError as e:
        logger.error("Scan failed for user %s: %s", user_id, e)
        return {"ok": False, "error": "Could not complete the scan. Please try again."}, 503

    return {
        "ok": True,
        "scan": scan.model_dump(),
        "message": f"Risk level identified as {scan.risk}.",
        **scan_message(scan.risk),
    }, 201


@scans_bp.route("", methods=["GET"])
def history():
    user_id = user_id_from(request.args)
    limit = request.args.get("limit", type=int)
    scans = scan_store.list_scans(user_id, limit=limit)
    return {"scans": [s.model_dump() for s in scans], "count": len(scans)}


@scans_bp.route("", methods=["DELETE"])
def clear():
    removed = scan_store.clear_scans(user_id_from(request.args))
    return {"ok": True, "removed": removed}


@scans_bp.route("/export.csv", methods=["GET"])
def export_csv():
    scans = scan_store.list_scans(user_id_from(request.args))
    if not scans:
        return {"ok": False, "error": "No scans to export"}, 404
    return Response(
        scans_to_csv(scans),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
    )
