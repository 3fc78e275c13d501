"""Exceptions raised by the board, registry and solver layers."""


class HexHuntError(Exception):
    """Base class for every recoverable puzzle error."""


class InvalidPlacement(HexHuntError, ValueError):
    """A treasure cannot be committed at the requested anchor."""


class UnknownCoordinate(HexHuntError, ValueError):
    """A grid coordinate lies outside the board."""


class UnknownShapeId(HexHuntError, LookupError):
    """No treasure template with the given id exists in the catalog."""

    def __str__(self) -> str:
        return f"Unknown treasure shape id: {self.args[0]!r}" if self.args else "Unknown treasure shape id."


class UnknownPlacement(HexHuntError, LookupError):
    """No committed treasure exists at the given index."""

    def __str__(self) -> str:
        return f"No placed treasure at index {self.args[0]!r}" if self.args else "No placed treasure."
