from .connection import get_connection


def run_query(sql, params=None):
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(sql, params or [])
        cols = [d[0] for d in cur.description] if cur.description else []
        rows = [dict(zip(cols, r)) for r in cur.fetchall()]
    return rows


def run_execute(sql, params=None) -> int:
    """INSERT/UPDATE/DELETE; returns the affected row count."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(sql, params or [])
        count = cur.rowcount
    return count
