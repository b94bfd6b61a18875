"""Specification state and conflict engine."""
