"""Retrieval: approximate matching, path codec and full-text search."""
