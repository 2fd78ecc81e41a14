"""Adaptadores de infraestructura: in-memory y SQLAlchemy."""
