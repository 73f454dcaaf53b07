"""
3ohda Manager - Source Package

A petty-cash ledger for the custodian of a cash float: record deposits
and expenses, attach receipt photos, and print a settlement report for
sign-off by the finance department.

DESIGN PRINCIPLES:
1. One owned state container per session
2. Derived views are always recomputed, never cached
3. Validation reports problems, it never fixes them
4. Amounts are magnitudes; the type gives the direction
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "3ohda Manager Team"
