"""Marketplace de alquileres: negociación, disponibilidad y reservas."""
