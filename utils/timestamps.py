from datetime import datetime, timezone


def now_iso() -> str:
    """UTC ISO-8601 문자열 (예: 2025-09-01T08:30:00.123456Z)"""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
