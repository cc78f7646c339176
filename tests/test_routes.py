import pytest
from mysql.connector import Error as MySQLError

from brava.store import scans as scan_store

TS = "2026-10-19T08:00:00.000+00:00"

FAMILY_MESSAGE = "Michael Smith and Sarah Johnson have been notified of this high-risk result."


def readings(right_d=38.0):
    left = [36.5, 36.6, 36.4, 36.5]
    right = [36.5, 36.9, 36.4, right_d]
    return [
        {"side": side, "position": pos, "temperature": t, "timestamp": TS}
        for side, temps in (("left", left), ("right", right))
        for pos, t in zip("ABCD", temps)
    ]


# --------------- live dashboard ---------------
def test_live_snapshot(client):
    r = client.get("/api/dashboard/live?user_id=demo")
    assert r.status_code == 200
    data = r.get_json()
    assert data["user"]["threshold"] == 1.0
    assert len(data["readings"]) == 8
    assert len(data["metrics"]["differentials"]) == 4
    assert data["alert"] == {"active": False, "message": ""}


def test_live_snapshot_with_anomaly_raises_alert(client):
    data = client.get("/api/dashboard/live?anomaly=1").get_json()
    assert data["alert"]["active"] is True
    assert "has exceeded your threshold" in data["alert"]["message"]


def test_unknown_user_is_404(client):
    r = client.get("/api/dashboard/live?user_id=ghost")
    assert r.status_code == 404
    assert r.get_json() == {"ok": False, "error": "Unknown user ghost"}


# --------------- risk analysis ---------------
def test_risk_analysis_with_model(client, fake_llm):
    fake_llm.queue({"risk_level": "High", "summary": "Peak at D.", "recommendation": "See a doctor."})
    r = client.post("/api/analysis/risk", json={"user_id": "demo", "sensor_readings": readings()})
    data = r.get_json()
    assert r.status_code == 200
    assert data["fallback"] is False
    assert data["analysis"]["risk_level"] == "High"
    assert data["metrics"]["peak_asymmetry"] == pytest.approx(1.5)
    assert set(data["analysis"]) == {"risk_level", "summary", "recommendation"}
    alert = data["family_alert"]
    assert alert["triggered"] is True
    assert alert["message"] == FAMILY_MESSAGE
    assert [n["contact_id"] for n in alert["notices"]] == ["contact-1", "contact-2"]
    assert all(n["sent_at"] for n in alert["notices"])


def test_high_risk_without_contacts_is_not_an_alert(client, store, fake_llm):
    store.users["demo"] = store.users["demo"].model_copy(update={"family_contacts": []})
    fake_llm.queue({"risk_level": "High", "summary": "Peak at D.", "recommendation": "See a doctor."})
    data = client.post("/api/analysis/risk", json={"sensor_readings": readings()}).get_json()
    assert data["analysis"]["risk_level"] == "High"
    assert data["family_alert"] == {"triggered": False, "contacts": [], "message": "", "notices": []}


def test_risk_analysis_falls_back_when_model_is_down(client, fake_llm):
    r = client.post("/api/analysis/risk", json={"sensor_readings": readings()})
    data = r.get_json()
    assert data["ok"] is True
    assert data["fallback"] is True
    assert data["analysis"]["risk_level"] == "High"
    assert data["family_alert"]["message"] == FAMILY_MESSAGE
    assert len(data["family_alert"]["notices"]) == 2


def test_low_risk_does_not_alert_family(client, fake_llm):
    fake_llm.queue({"risk_level": "Low", "summary": "All balanced.", "recommendation": "Keep monitoring."})
    data = client.post("/api/analysis/risk", json={"sensor_readings": readings(right_d=36.6)}).get_json()
    assert data["family_alert"] == {"triggered": False, "contacts": [], "message": "", "notices": []}


def test_risk_analysis_generates_readings_when_none_supplied(client):
    data = client.post("/api/analysis/risk", json={"anomaly": True}).get_json()
    assert len(data["readings"]) == 8
    assert data["metrics"]["peak_asymmetry"] >= 1.0


@pytest.mark.parametrize("body", [
    {"sensor_readings": "hot"},
    {"sensor_readings": [{"side": "middle", "position": "A", "temperature": 36.5, "timestamp": TS}]},
    {"sensor_readings": []},
])
def test_risk_analysis_rejects_bad_readings(client, body):
    r = client.post("/api/analysis/risk", json=body)
    assert r.status_code == 400
    assert r.get_json()["ok"] is False


@pytest.mark.parametrize("path", ["/api/analysis/risk", "/api/consultation/tips", "/api/reports/summary"])
def test_flow_endpoints_reject_non_iso_timestamps(client, fake_llm, path):
    bad = [{**r, "timestamp": "yesterday"} for r in readings()]
    r = client.post(path, json={"sensor_readings": bad})
    assert r.status_code == 400
    assert "ISO-8601" in r.get_json()["error"]
    assert fake_llm.calls == []


# --------------- scans ---------------
def test_scan_lifecycle(client, store):
    r = client.post("/api/scans", json={"user_id": "demo"})
    assert r.status_code == 201
    data = r.get_json()
    assert data["scan"]["risk"] == "Low"
    assert data["message"] == "Risk level identified as Low."
    assert data["headline"] == "Low Risk"

    history = client.get("/api/scans?user_id=demo").get_json()
    assert history["count"] == 1
    assert history["scans"][0]["id"] == data["scan"]["id"]

    csv = client.get("/api/scans/export.csv?user_id=demo")
    assert csv.status_code == 200
    assert csv.mimetype == "text/csv"
    assert "smart-bra-data.csv" in csv.headers["Content-Disposition"]
    assert csv.get_data(as_text=True).splitlines()[0].startswith("ScanID,Timestamp,Risk")

    assert client.delete("/api/scans?user_id=demo").get_json() == {"ok": True, "removed": 1}
    assert client.get("/api/scans/export.csv?user_id=demo").status_code == 404


def test_scan_message_follows_risk(client):
    data = client.post("/api/scans", json={"anomaly": True}).get_json()
    expected = "High Risk Detected" if data["scan"]["risk"] == "High" else "Low Risk"
    assert data["headline"] == expected


def test_scan_storage_failure_is_503(client, monkeypatch):
    def boom(user_id, scan):
        raise MySQLError("lost connection")
    monkeypatch.setattr(scan_store, "add_scan", boom)
    r = client.post("/api/scans", json={})
    assert r.status_code == 503
    assert r.get_json()["ok"] is False


# --------------- reports ---------------
def test_trends(client):
    data = client.get("/api/reports/trends?range=monthly").get_json()
    assert data["series"]["range"] == "monthly"
    assert len(data["series"]["labels"]) == 30
    assert client.get("/api/reports/trends?range=yearly").status_code == 400


def test_scan_series(client):
    client.post("/api/scans", json={})
    data = client.get("/api/reports/scans").get_json()
    assert data["count"] == 1
    assert len(data["series"]["ultrasound"]) == 1


def test_report_summary(client, fake_llm):
    fake_llm.queue({"summary": "Sensor h runs warmer than sensor d."})
    data = client.post("/api/reports/summary", json={"sensor_readings": readings()}).get_json()
    assert data == {"ok": True, "summary": "Sensor h runs warmer than sensor d.", "fallback": False}
    assert "Sensor ID: h, Temperature: 38.0°C" in fake_llm.calls[0]["system"]


def test_report_summary_fallback(client):
    data = client.post("/api/reports/summary", json={}).get_json()
    assert data["fallback"] is True
    assert data["summary"].startswith("Report summary temporarily unavailable")


# --------------- consultation ---------------
def test_health_tips(client, fake_llm):
    fake_llm.queue({"health_tips": ["Scan at the same time daily."], "educational_content": "About asymmetry."})
    data = client.post("/api/consultation/tips", json={}).get_json()
    assert data["health_tips"] == ["Scan at the same time daily."]
    assert data["fallback"] is False


def test_health_tips_fallback(client):
    data = client.post("/api/consultation/tips", json={}).get_json()
    assert data["fallback"] is True
    assert data["health_tips"]


def test_doctors(client):
    assert len(client.get("/api/consultation/doctors").get_json()["doctors"]) == 3


# --------------- profile and onboarding ---------------
def test_profile_update(client, store):
    r = client.put("/api/profile", json={"user_id": "demo", "medical_history": "Mother had breast cancer."})
    assert r.get_json()["user"]["medical_history"] == "Mother had breast cancer."
    assert store.users["demo"].medical_history == "Mother had breast cancer."
    assert client.put("/api/profile", json={"user_id": "demo"}).status_code == 400
    assert client.put("/api/profile", json={"email": "nope"}).status_code == 400


def test_profile_update_for_unknown_user_is_404(client, store):
    r = client.put("/api/profile", json={"user_id": "ghost", "name": "Nobody"})
    assert r.status_code == 404
    assert "ghost" not in store.users


def test_threshold_update(client, store):
    assert client.put("/api/profile/threshold", json={"threshold": 1.5}).get_json() == {"ok": True, "threshold": 1.5}
    assert store.users["demo"].threshold == 1.5
    assert client.put("/api/profile/threshold", json={"threshold": 3.0}).status_code == 400
    assert client.put("/api/profile/threshold", json={}).status_code == 400
    assert client.put("/api/profile/threshold", json={"user_id": "ghost", "threshold": 1.0}).status_code == 404


def test_threshold_changes_live_alerts(client, store):
    client.put("/api/profile/threshold", json={"threshold": 2.5})
    data = client.get("/api/dashboard/live").get_json()
    assert data["user"]["threshold"] == 2.5
    assert data["alert"]["active"] is False


def test_contacts(client, store):
    r = client.post("/api/profile/contacts", json={"name": "Ana", "relationship": "Friend",
                                                   "phone": "555-0101", "email": "ana@example.com"})
    assert r.status_code == 201
    contact_id = r.get_json()["contact"]["id"]
    assert len(store.users["demo"].family_contacts) == 3

    assert client.delete(f"/api/profile/contacts/{contact_id}").get_json() == {"ok": True}
    assert client.delete(f"/api/profile/contacts/{contact_id}").status_code == 404
    assert client.post("/api/profile/contacts", json={"name": "Incomplete"}).status_code == 400


def test_contact_ids_are_scoped_per_user(client, store):
    contact = {"id": "contact-1", "name": "Ana", "relationship": "Friend",
               "phone": "555-0101", "email": "ana@example.com"}
    r = client.post("/api/profile/contacts", json={"user_id": "demo", **contact})
    assert r.status_code == 409
    assert r.get_json()["ok"] is False

    client.post("/api/onboarding", json={"user_id": "second", "age": 40, "weight": 70})
    r = client.post("/api/profile/contacts", json={"user_id": "second", **contact})
    assert r.status_code == 201
    assert r.get_json()["contact"]["id"] == "contact-1"


def test_onboarding(client, store):
    r = client.post("/api/onboarding", json={"user_id": "new-user", "age": 29, "weight": 58})
    data = r.get_json()
    assert data["ok"] is True
    assert data["next"] == "/dashboard"
    assert store.users["new-user"].age == 29
    assert client.post("/api/onboarding", json={"age": 29}).status_code == 400
    assert client.post("/api/onboarding", json={"age": -1, "weight": 58}).status_code == 400


@pytest.mark.parametrize("age", [34.9, "34.5"])
def test_onboarding_rejects_fractional_age(client, store, age):
    r = client.post("/api/onboarding", json={"user_id": "demo", "age": age, "weight": 58})
    assert r.status_code == 400
    assert "whole number" in r.get_json()["error"]
    assert store.users["demo"].age == 34


# --------------- pages ---------------
@pytest.mark.parametrize("path", [
    "/", "/onboarding", "/dashboard", "/dashboard/scan", "/dashboard/reports",
    "/dashboard/reports?range=daily", "/dashboard/settings", "/dashboard/consultation",
])
def test_pages_render(client, path):
    assert client.get(path).status_code == 200


def test_dashboard_page_shows_metrics(client):
    html = client.get("/dashboard?anomaly=1").get_data(as_text=True)
    assert "Hi, Jennifer" in html
    assert "High Thermal Asymmetry Detected!" in html


def test_dashboard_for_unknown_user(client):
    assert client.get("/dashboard?user_id=ghost").status_code == 404


def test_onboarding_form_redirects_to_dashboard(client, store):
    r = client.post("/onboarding", data={"user_id": "demo", "age": "35", "weight": "64"})
    assert r.status_code == 302
    assert "/dashboard" in r.headers["Location"]
    assert store.users["demo"].age == 35

    r = client.post("/onboarding", data={"user_id": "demo", "age": "", "weight": "64"})
    assert r.status_code == 200
    assert "must be numbers" in r.get_data(as_text=True)


def test_analysis_page_uses_rule_based_fallback(client):
    html = client.post("/dashboard/analysis", data={"user_id": "demo", "anomaly": "0"}).get_data(as_text=True)
    assert "(rule-based)" in html


def test_scan_page(client, store):
    html = client.post("/dashboard/scan", data={"user_id": "demo", "anomaly": "0"}).get_data(as_text=True)
    assert "Low Risk" in html
    assert len(store.scans["demo"]) == 1


def test_settings_page_saves_threshold(client, store):
    html = client.post("/dashboard/settings", data={"user_id": "demo", "section": "threshold", "threshold": "1.8"})
    assert "Alert Threshold: 1.8°C" in html.get_data(as_text=True)
    assert store.users["demo"].threshold == 1.8

    bad = client.post("/dashboard/settings", data={"user_id": "demo", "section": "threshold", "threshold": "9"})
    assert "threshold must be between" in bad.get_data(as_text=True)


def test_report_and_consultation_pages_post(client):
    assert "Report summary temporarily unavailable" in client.post("/dashboard/reports").get_data(as_text=True)
    html = client.post("/dashboard/consultation").get_data(as_text=True)
    assert "<li>" in html
