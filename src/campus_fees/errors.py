"""Exception types raised by the fee engine and its collaborators."""

from __future__ import annotations


class FeeError(Exception):
    """Base class for all fee engine errors."""


class ConfigurationError(FeeError):
    """Rate tables or engine wiring are invalid. Raised at startup."""


class StrategyNotFoundError(ConfigurationError):
    """No pricing strategy is registered for an order category."""

    def __init__(self, category: object) -> None:
        super().__init__(f"No fee strategy registered for order category '{category}'.")
        self.category = category


class FeeCalculationError(FeeError):
    """A single fee computation failed."""


class CollaboratorError(FeeError):
    """A distance, region or calendar collaborator failed."""
