"""Infrastructure Layer — database session management and structured logging.

Invariants:
    - Nothing here knows about transactions, sites or tags
"""
