"""Agent functions for Blueprint Factory."""

from .blueprint_agent import generate_blueprint_node, validate_blueprint_node

__all__ = ["generate_blueprint_node", "validate_blueprint_node"]
