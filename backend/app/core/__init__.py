"""Core Layer — pure domain rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are pure; clock and randomness are injectable parameters

Design Decisions:
    - Functional core separated from the imperative shell (stores, services, routes)
"""
