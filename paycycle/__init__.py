"""
paycycle - Source Package

Recurrence expansion and weekly aggregation engine for a personal
finance tracker: bills, paychecks, deposits and gigs grouped into
Sunday-Saturday weeks with running-balance projections.

PRINCIPLES:
1. The engine is a pure function of a snapshot of records
2. Malformed input degrades to a default, it never raises
3. Storage is an external collaborator behind an interface
4. Recurring instances are computed on demand, never persisted
"""

__version__ = "1.0.0"
__author__ = "paycycle Team"
