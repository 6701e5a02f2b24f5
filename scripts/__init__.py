"""Operational scripts: schema setup and sample data seeding."""
