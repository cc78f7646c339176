# brava/routes/profile.py
from flask import Blueprint, request
from mysql.connector import IntegrityError

from brava.routes.common import load_user, user_id_from
from brava.store import profile as profile_store

profile_bp = Blueprint("profile", __name__)


@profile_bp.route("/profile", methods=["GET"])
def get_profile():
    user, err = load_user(user_id_from(request.args))
    if err:
        return err
    return {"user": user.model_dump()}


@profile_bp.route("/profile", methods=["PUT"])
def update_profile():
    """
    Input JSON: { "user_id": "demo", "name": "...", "medical_history": "..." }
    Only the editable profile fields are accepted.
    """
    body = dict(request.get_json(force=True, silent=True) or {})
    user, err = load_user(user_id_from(body))
    if err:
        return err
    body.pop("user_id", None)
    if not body:
        return {"ok": False, "error": "No profile fields supplied"}, 400
    try:
        saved = profile_store.save_profile(user.id, body)
    except ValueError as e:
        return {"ok": False, "error": str(e)}, 400
    if saved is None:
        return {"ok": False, "error": f"Unknown user {user.id}"}, 404
    return {"ok": True, "user": saved.model_dump()}


@profile_bp.route("/profile/threshold", methods=["PUT"])
def update_threshold():
    body = request.get_json(force=True, silent=True) or {}
    if "threshold" not in body:
        return {"ok": False, "error": "Missing threshold"}, 400
    user_id = user_id_from(body)
    try:
        user = profile_store.update_threshold(user_id, body["threshold"])
    except ValueError as e:
        return {"ok": False, "error": str(e)}, 400
    if user is None:
        return {"ok": False, "error": f"Unknown user {user_id}"}, 404
    return {"ok": True, "threshold": user.threshold}


@profile_bp.route("/profile/contacts", methods=["POST"])
def add_contact():
    body = dict(request.get_json(force=True, silent=True) or {})
    user, err = load_user(user_id_from(body))
    if err:
        return err
    body.pop("user_id", None)
    try:
        contact = profile_store.add_contact(user.id, body)
    except ValueError as e:
        return {"ok": False, "error": str(e)}, 400
    except IntegrityError:
        return {"ok": False, "error": f"Contact {body.get('id')} already exists"}, 409
    return {"ok": True, "contact": contact.model_dump()}, 201


@profile_bp.route("/profile/contacts/<contact_id>", methods=["DELETE"])
def remove_contact(contact_id):
    if not profile_store.remove_contact(user_id_from(request.args), contact_id):
        return {"ok": False, "error": "Contact not found"}, 404
    return {"ok": True}


@profile_bp.route("/onboarding", methods=["POST"])
def onboarding():
    """
    Input JSON: { "user_id": "demo", "age": 34, "weight": 65 }
    """
    body = request.get_json(force=True, silent=True) or {}
    if body.get("age") in (None, "") or body.get("weight") in (None, ""):
        return {"ok": False, "error": "Missing age or weight"}, 400
    try:
        user = profile_store.complete_onboarding(user_id_from(body), body["age"], body["weight"])
    except ValueError as e:
        return {"ok": False, "error": str(e)}, 400
    return {"ok": True, "user": user.model_dump(), "next": "/dashboard"}
