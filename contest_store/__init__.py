"""
Persistence layer for scraped contest metadata (contests, problems, submissions).
"""

__version__ = "0.1.0"
