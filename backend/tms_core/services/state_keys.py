"""Persisted key names for connectivity state in the system_meta table."""

INSTANCE_ID = "core.instance_id"
SESSION_CURRENT = "core.enhanced.session.current"
SESSION_PREVIOUS = "core.enhanced.session.previous"
HEARTBEAT_LAST_SUCCESS = "core.enhanced.heartbeat.last_success"
