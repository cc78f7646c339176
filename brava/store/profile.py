# brava/store/profile.py
"""
User profile, alert threshold and family contacts.

Profiles are created on first onboarding from the demo profile so every user
has the fields the AI flows require.
"""
import logging
import math
import uuid
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from brava import config
from brava.db.fetch import run_execute, run_query
from brava.sensors.mock_data import mock_user
from brava.sensors.types import FamilyContact, User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "email", "age", "weight", "medical_history", "paired_device_id", "avatar_url")

_USER_SQL = """
SELECT id, name, email, age, weight, medical_history, threshold, paired_device_id, avatar_url
FROM users
WHERE id = %s
"""

_CONTACTS_SQL = """
SELECT id, name, relationship, phone, email
FROM family_contacts
WHERE user_id = %s
ORDER BY id
"""

_UPSERT_SQL = """
INSERT INTO users (id, name, email, age, weight, medical_history, threshold, paired_device_id, avatar_url, onboarded)
VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
ON DUPLICATE KEY UPDATE
  name = VALUES(name), email = VALUES(email), age = VALUES(age), weight = VALUES(weight),
  medical_history = VALUES(medical_history), threshold = VALUES(threshold),
  paired_device_id = VALUES(paired_device_id), avatar_url = VALUES(avatar_url),
  onboarded = GREATEST(onboarded, VALUES(onboarded))
"""


def _row_to_user(row: dict, contacts: list) -> User:
    return User(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        age=int(row["age"]),
        weight=float(row["weight"]) if row.get("weight") is not None else None,
        medical_history=row.get("medical_history") or "",
        threshold=float(row["threshold"]),
        paired_device_id=row.get("paired_device_id"),
        avatar_url=row.get("avatar_url") or "",
        family_contacts=[FamilyContact(**{k: str(c[k]) for k in ("id", "name", "relationship", "phone", "email")})
                         for c in contacts],
    )


def get_user(user_id: str) -> Optional[User]:
    rows = run_query(_USER_SQL, [user_id])
    if not rows:
        return None
    contacts = run_query(_CONTACTS_SQL, [user_id])
    return _row_to_user(rows[0], contacts)


def _write_user(user: User, onboarded: bool = False) -> None:
    run_execute(_UPSERT_SQL, [
        user.id, user.name, str(user.email), user.age, user.weight, user.medical_history,
        user.threshold, user.paired_device_id, user.avatar_url, 1 if onboarded else 0,
    ])


def _seed_user(user_id: str) -> User:
    return mock_user().model_copy(update={"id": user_id, "family_contacts": []})


def save_profile(user_id: str, fields: Dict[str, Any]) -> Optional[User]:
    """Merge editable profile fields into the stored user and validate the result. None if there is no such user."""
    unknown = set(fields) - set(PROFILE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown profile field(s): {', '.join(sorted(unknown))}")

    current = get_user(user_id)
    if current is None:
        return None
    merged = current.model_dump()
    merged.update(fields)
    try:
        user = User.model_validate(merged)
    except ValidationError as e:
        raise ValueError(f"Invalid profile: {e}") from e

    _write_user(user)
    logger.info("Profile saved for user %s", user_id)
    return user


def validate_threshold(value: Any) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValueError("threshold must be a number")
    if not (config.THRESHOLD_MIN <= v <= config.THRESHOLD_MAX):
        raise ValueError(f"threshold must be between {config.THRESHOLD_MIN} and {config.THRESHOLD_MAX}")
    steps = (v - config.THRESHOLD_MIN) / config.THRESHOLD_STEP
    if abs(steps - round(steps)) > 1e-6:
        raise ValueError(f"threshold must be a multiple of {config.THRESHOLD_STEP}")
    return round(v, 1)


def update_threshold(user_id: str, value: Any) -> Optional[User]:
    threshold = validate_threshold(value)
    count = run_execute("UPDATE users SET threshold = %s WHERE id = %s", [threshold, user_id])
    # rowcount is 0 both for a missing user and an unchanged value
    user = get_user(user_id)
    if user is not None and count:
        logger.info("Threshold for user %s set to %.1f°C", user_id, threshold)
    return user


def add_contact(user_id: str, contact: Dict[str, Any]) -> FamilyContact:
    data = dict(contact)
    data.setdefault("id", f"contact-{uuid.uuid4().hex[:8]}")
    try:
        fc = FamilyContact.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid contact: {e}") from e

    # ids are unique per user; a repeated id raises IntegrityError
    run_execute(
        "INSERT INTO family_contacts (id, user_id, name, relationship, phone, email) VALUES (%s, %s, %s, %s, %s, %s)",
        [fc.id, user_id, fc.name, fc.relationship, fc.phone, fc.email],
    )
    return fc


def remove_contact(user_id: str, contact_id: str) -> bool:
    count = run_execute("DELETE FROM family_contacts WHERE user_id = %s AND id = %s", [user_id, contact_id])
    return count > 0


def validate_onboarding(age: Any, weight: Any) -> Tuple[int, float]:
    """Age as a whole number of years and weight in kg, both positive. Form strings are accepted."""
    try:
        age_f = float(age)
        weight_v = float(weight)
    except (TypeError, ValueError):
        raise ValueError("age and weight must be numbers")
    if not (math.isfinite(age_f) and math.isfinite(weight_v)):
        raise ValueError("age and weight must be numbers")
    if not age_f.is_integer():
        raise ValueError("age must be a whole number")
    if age_f <= 0 or weight_v <= 0:
        raise ValueError("age and weight must be positive")
    return int(age_f), weight_v


def complete_onboarding(user_id: str, age: Any, weight: Any) -> User:
    age_v, weight_v = validate_onboarding(age, weight)

    current = get_user(user_id) or _seed_user(user_id)
    try:
        user = User.model_validate({**current.model_dump(), "age": age_v, "weight": weight_v})
    except ValidationError as e:
        raise ValueError(f"Invalid onboarding data: {e}") from e
    _write_user(user, onboarded=True)
    logger.info("Onboarding complete for user %s", user_id)
    return user
