# realty_frontend/dev_observability.py
# Redacted event timeline for debugging session mutations

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

MAX_EVENTS = 100

# Sensitive keys that must be redacted
SENSITIVE_KEYS = {
    "password",
    "confirmpassword",
    "token",
    "secret",
    "api_key",
    "cookie",
}


def redact_value(key: str, value: Any) -> Any:
    """
    Redact sensitive values.
    - If key is sensitive: return "[REDACTED]"
    - If key contains "id" in name: return last 4 chars (e.g., "…a9f2")
    - Otherwise: return actual value
    """
    key_lower = key.lower()

    if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
        return "[REDACTED]"

    if "id" in key_lower and isinstance(value, str) and len(value) > 4:
        return f"…{value[-4:]}"

    if isinstance(value, dict):
        return {k: redact_value(k, v) for k, v in value.items()}

    return value


def now_iso() -> str:
    """Return current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def track_event(debug_state: dict, event_name: str, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Append an event to the event timeline.

    Args:
        debug_state: dict owned by the caller (e.g. SessionStore.debug_state)
        event_name: Short descriptive name (e.g., "login_success", "session_purged")
        details: Optional dict of additional context (will be redacted)
    """
    events = debug_state.setdefault("_dev_events", [])

    event = {
        "ts": now_iso(),
        "name": event_name,
    }
    if details:
        event["details"] = {k: redact_value(k, v) for k, v in details.items()}

    events.append(event)

    if len(events) > MAX_EVENTS:
        debug_state["_dev_events"] = events[-MAX_EVENTS:]


def mark_key_set(debug_state: dict, key: str, source: str) -> None:
    """Record when a storage key was last written and by which operation."""
    meta = debug_state.setdefault("_dev_key_meta", {})
    meta[key] = {
        "source": source,
        "ts": now_iso(),
    }


def snapshot_state(debug_state: dict, source: Mapping[str, Any], keys_of_interest: List[str]) -> Dict[str, Any]:
    """
    Create a redacted snapshot of the given keys.

    Args:
        debug_state: dict holding key metadata from mark_key_set
        source: mapping to read values from (e.g. storage contents)
        keys_of_interest: keys to include

    Returns:
        Dict with redacted values and metadata
    """
    snapshot = {}
    key_meta = debug_state.get("_dev_key_meta", {})

    for key in keys_of_interest:
        if key in source and source[key] is not None:
            entry = {
                "value": redact_value(key, source[key]),
                "exists": True,
            }
            if key in key_meta:
                entry["meta"] = key_meta[key]
            snapshot[key] = entry
        else:
            snapshot[key] = {"exists": False}

    return snapshot


def get_recent_events(debug_state: dict, limit: int = 30) -> List[Dict[str, Any]]:
    """Most recent events first."""
    events = debug_state.get("_dev_events", [])
    return list(reversed(events[-limit:]))


def clear_debug_history(debug_state: dict) -> None:
    """Clear events and key metadata."""
    debug_state["_dev_events"] = []
    debug_state["_dev_key_meta"] = {}


def export_snapshot_json(debug_state: dict, source: Mapping[str, Any], keys_of_interest: List[str]) -> str:
    """Full diagnostic snapshot (state + recent events) as a JSON string."""
    export = {
        "timestamp": now_iso(),
        "state": snapshot_state(debug_state, source, keys_of_interest),
        "recent_events": get_recent_events(debug_state, limit=50),
    }
    return json.dumps(export, indent=2, default=str)
