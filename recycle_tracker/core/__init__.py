"""
Core modules for Recycle Tracker.

This package contains the catalog, ledger, statistics, leaderboard and
account components, plus the coordinator that composes them.
"""
