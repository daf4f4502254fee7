"""
Sprout - Personal Finance Data Layer

The embedded transactional core of a personal finance tracker:
versioned SQLite schema, entity repositories and derived analytics.

DESIGN PRINCIPLES:
1. The schema only moves forward, one committed step at a time
2. Repositories enforce invariants at the storage boundary
3. Analytics are always recomputed from raw rows
4. Every mutation is auditable
5. The database handle is owned and passed in, never global
"""

__version__ = "1.0.0"
__author__ = "Sprout Team"
