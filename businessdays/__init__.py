"""
Business days: add working days and hours on a fixed schedule with holidays.
"""

__version__ = "1.0.0"
