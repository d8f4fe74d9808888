"""
FitTrack - Personal daily-metrics tracker.

Records one entry per day (weight, waist, steps, workouts, protein palms)
in a local key/value store and derives rolling averages, weekly summaries,
and chart series from them.
"""

__version__ = "0.1.0"
