"""
Wohnung Finder - watches Berlin housing companies for new rental listings.

Polls Vonovia, Gewobag, DEGEWO, Deutsche Wohnen, STADT UND LAND and
Berlinovo for each saved search, filters by district, rooms, area and
rent, and emails listings the search has not reported before.
"""

__version__ = "0.1.0"
