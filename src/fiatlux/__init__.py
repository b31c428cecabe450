"""fiatlux - offline scripture lookup and search.

Resolves references such as "1 Kings 3:16" or "psalms.23" to canonical
addresses, indexes a verse corpus by book, chapter and verse, and searches
it either through a full-text index or by approximate matching.
"""

__version__ = "0.3.10"
