"""Services — orchestration of stores for each use case.

Invariants:
    - Services never import FastAPI; routers translate HTTP to service calls
    - Stores are constructor-injected
"""
