"""Adapters translating external data into domain objects."""
