"""Services Layer — identity, token rotation, heartbeat ledger, gateway, and trigger.

Invariants:
    - Services hold no state between calls: everything is re-read from the KeyValueStore
    - Only DatabaseError may escape a service; remote failures become ConnectionState

Design Decisions:
    - One small class per persisted concern (ADR: ExMA no god objects)
"""
