"""Capa de dominio: entidades, value objects, errores y reglas puras."""

from marketplace.domain import constants, errors

__all__ = ["constants", "errors"]
