"""
Dashboard module - Per-school summary statistics.
"""
