# brava/scripts/init_db.py
"""
Create the Brava tables and seed the demo user.

    python -m brava.scripts.init_db [--no-seed]
"""
import json
import logging
import sys
from pathlib import Path

from mysql.connector import Error

from brava import config
from brava.db.connection import get_connection
from brava.sensors.mock_data import mock_user
from brava.store import profile as profile_store

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).resolve().parent.parent / "db" / "schema.sql"


def schema_statements(path: Path = SCHEMA_FILE):
    text = path.read_text(encoding="utf-8")
    return [s.strip() for s in text.split(";") if s.strip()]


def apply_schema():
    statements = schema_statements()
    with get_connection() as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        cur.close()
    return len(statements)


def seed_demo_user():
    demo = mock_user()
    if profile_store.get_user(demo.id):
        return False
    profile_store.complete_onboarding(demo.id, demo.age, demo.weight)
    for contact in demo.family_contacts:
        profile_store.add_contact(demo.id, contact.model_dump())
    return True


def main(argv=None):
    logging.basicConfig(level=config.LOG_LEVEL)
    argv = sys.argv[1:] if argv is None else argv
    try:
        applied = apply_schema()
        seeded = False if "--no-seed" in argv else seed_demo_user()
    except Error as e:
        logger.error("Database initialisation failed: %s", e)
        return 1

    print(json.dumps({
        "database": config.MYSQL_DB,
        "statements": applied,
        "demo_user_seeded": seeded,
    }, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
