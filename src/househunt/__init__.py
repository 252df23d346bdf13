"""
HouseHunt - Terminal-first home listing tracker.

Captures real-estate listing pages, extracts their key facts with a
chain of fallback strategies, and keeps them alongside your own notes
in a local database.
"""

__version__ = "0.1.0"
__app_name__ = "househunt"
