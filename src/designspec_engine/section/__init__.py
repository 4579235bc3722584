"""Managed-section handling: locate, filter, number, and splice the Design Specs section."""
