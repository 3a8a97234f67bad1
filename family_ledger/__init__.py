"""
Family Ledger - Source Package

A small record-keeping service for households ("families") and the
expenses attributed to them.

DESIGN PRINCIPLES:
1. Every operation is a single synchronous call that fully applies or has no effect
2. Errors come back as tagged results, never as stray exceptions
3. Only the creator of a family may change it (when ownership is enforced)
4. Every write is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Family Ledger Team"
