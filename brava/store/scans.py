# brava/store/scans.py
import logging
from typing import List, Optional

from mysql.connector import Error as MySQLError

from brava.db.fetch import run_execute, run_query
from brava.sensors.types import ScanReadings, ScanResult

logger = logging.getLogger(__name__)


def add_scan(user_id: str, scan: ScanResult) -> ScanResult:
    run_execute(
        """
        INSERT INTO scans (id, user_id, scanned_at, temperature, bioimpedance, ultrasound, risk)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        """,
        [scan.id, user_id, scan.timestamp, scan.readings.temperature,
         scan.readings.bioimpedance, scan.readings.ultrasound, scan.risk],
    )
    logger.info("Saved %s for user %s (risk=%s)", scan.id, user_id, scan.risk)
    return scan


def _row_to_scan(row: dict) -> ScanResult:
    return ScanResult(
        id=row["id"],
        timestamp=row["scanned_at"],
        readings=ScanReadings(
            temperature=float(row["temperature"]),
            bioimpedance=float(row["bioimpedance"]),
            ultrasound=float(row["ultrasound"]),
        ),
        risk=row["risk"],
    )


def list_scans(user_id: str, limit: Optional[int] = None) -> List[ScanResult]:
    """Scan history, newest first. A failed load is logged and reads as empty."""
    sql = """
      SELECT id, scanned_at, temperature, bioimpedance, ultrasound, risk
      FROM scans
      WHERE user_id = %s
      ORDER BY scanned_at DESC
    """
    if limit:
        sql += f" LIMIT {int(limit)}"
    try:
        rows = run_query(sql, [user_id])
    except MySQLError as e:
        logger.error("Failed to load scan history for user %s: %s", user_id, e)
        return []
    return [_row_to_scan(r) for r in rows]


def clear_scans(user_id: str) -> int:
    count = run_execute("DELETE FROM scans WHERE user_id = %s", [user_id])
    logger.info("Cleared %d scan(s) for user %s", count, user_id)
    return count
