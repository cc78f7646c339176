# brava/flows/notify.py
"""
Family alerts for high-risk results.

No message gateway is wired up; each alert is logged and returned so the
dashboard can show who was told.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List

from brava.sensors.types import User

logger = logging.getLogger(__name__)


def notify_family_contacts(user: User, risk_level: str, summary: str = "") -> List[Dict]:
    if risk_level != "High":
        return []

    if not user.family_contacts:
        logger.warning("High risk detected for user %s but no family contacts are configured", user.id)
        return []

    logger.warning("High risk detected for user %s. Notifying %d family contact(s).",
                   user.name, len(user.family_contacts))
    sent_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
    notices = []
    for contact in user.family_contacts:
        logger.info("- Notifying %s (%s) at %s and %s",
                    contact.name, contact.relationship, contact.email, contact.phone)
        notices.append({
            "contact_id": contact.id,
            "name": contact.name,
            "relationship": contact.relationship,
            "email": contact.email,
            "phone": contact.phone,
            "sent_at": sent_at,
            "message": (
                f"{user.name}'s latest Brava scan was assessed as high risk. "
                f"{summary}".strip()
            ),
        })
    return notices
