"""User Registry Application Package — users with profile images.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
