"""
Scheduling domain: time arithmetic, schedule normalization and occupancy math.

Everything in this package is pure: callers pass snapshots of appointments and
working hours loaded elsewhere.
"""
