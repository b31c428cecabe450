"""Corpus indexing and translation loading."""
