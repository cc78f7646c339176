# brava/routes/dashboard.py
"""Server-rendered pages. The JSON API under /api carries the same data."""
import logging

from flask import Blueprint, abort, redirect, render_template, request, url_for
from mysql.connector import Error as MySQLError

from brava.reports.trends import history_series, scan_trend_series
from brava.routes.common import (
    flag,
    run_health_tips,
    run_report_summary,
    run_risk_analysis,
    user_id_from,
)
from brava.routes.live import live_snapshot
from brava.routes.scans import perform_scan, scan_message
from brava.sensors.mock_data import generate_sensor_readings, mock_doctors
from brava.store import profile as profile_store
from brava.store import scans as scan_store

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint("dashboard", __name__)


def _current_user():
    user_id = user_id_from(request.values)
    user = profile_store.get_user(user_id)
    if user is None:
        abort(404, description=f"Unknown user {user_id}")
    return user


@dashboard_bp.route("/", methods=["GET"])
def index():
    return render_template("index.html", user_id=user_id_from(request.args))


@dashboard_bp.route("/onboarding", methods=["GET", "POST"])
def onboarding():
    user_id = user_id_from(request.values)
    error = None
    if request.method == "POST":
        try:
            profile_store.complete_onboarding(user_id, request.form.get("age"), request.form.get("weight"))
            return redirect(url_for("dashboard.dashboard", user_id=user_id))
        except ValueError as e:
            error = str(e)
    return render_template("onboarding.html", user_id=user_id, error=error)


@dashboard_bp.route("/dashboard", methods=["GET"])
def dashboard():
    user = _current_user()
    snapshot = live_snapshot(user, flag(request.args.get("anomaly")))
    return render_template("dashboard.html", user=user, snap=snapshot, analysis=None)


@dashboard_bp.route("/dashboard/analysis", methods=["POST"])
def analysis():
    user = _current_user()
    readings = generate_sensor_readings(flag(request.form.get("anomaly")), threshold=user.threshold)
    result = run_risk_analysis(user, readings)
    snapshot = live_snapshot(user, readings=readings)
    return render_template("dashboard.html", user=user, snap=snapshot, analysis=result)


@dashboard_bp.route("/dashboard/scan", methods=["GET", "POST"])
def scan():
    user = _current_user()
    scan_result, message, failed = None, None, False
    if request.method == "POST":
        try:
            scan_result = perform_scan(user.id, flag(request.form.get("anomaly")))
            message = scan_message(scan_result.risk)
        except MySQLError as e:
            logger.error("Scan failed for user %s: %s", user.id, e)
            failed = True
    return render_template("scan.html", user=user, scan=scan_result, message=message, failed=failed)


@dashboard_bp.route("/dashboard/reports", methods=["GET", "POST"])
def reports():
    user = _current_user()
    scans = scan_store.list_scans(user.id)
    summary = None
    if request.method == "POST":
        summary = run_report_summary(user, generate_sensor_readings(threshold=user.threshold))
    range_name = request.args.get("range", "weekly")
    try:
        history = history_series(range_name)
    except ValueError:
        history = history_series("weekly")
    return render_template(
        "reports.html",
        user=user,
        scans=scans,
        series=scan_trend_series(scans),
        history=history,
        summary=summary,
    )


@dashboard_bp.route("/dashboard/settings", methods=["GET", "POST"])
def settings():
    user = _current_user()
    error = saved = None
    if request.method == "POST":
        try:
            if request.form.get("section") == "threshold":
                user = profile_store.update_threshold(user.id, request.form.get("threshold")) or user
            else:
                fields = {k: request.form[k] for k in ("name", "email", "age", "medical_history") if k in request.form}
                user = profile_store.save_profile(user.id, fields) or user
            saved = True
        except ValueError as e:
            error = str(e)
    return render_template("settings.html", user=user, error=error, saved=saved)


@dashboard_bp.route("/dashboard/consultation", methods=["GET", "POST"])
def consultation():
    user = _current_user()
    tips = None
    if request.method == "POST":
        tips = run_health_tips(user, generate_sensor_readings(threshold=user.threshold))
    return render_template("consultation.html", user=user, doctors=mock_doctors(), tips=tips)
