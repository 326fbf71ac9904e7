"""Infrastructure Layer — database, filesystem and logging.

Invariants:
    - Infrastructure never imports from services/
    - Storage faults are mapped to DatabaseError / AssetStorageError
"""
