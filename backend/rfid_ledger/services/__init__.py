"""Services Layer — imperative shell around the functional core.

Invariants:
    - Services own every await; parsing and aggregation stay in core/
    - One service instance per request-scoped AsyncSession

Design Decisions:
    - for_session() factories wire the SQL implementations of the core protocols
"""
