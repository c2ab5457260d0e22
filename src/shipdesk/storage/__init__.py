"""Persistence layer: table models, gateway and seed data."""
