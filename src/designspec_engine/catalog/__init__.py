"""Catalog entries: enrichment of design links and their markdown rendering."""
