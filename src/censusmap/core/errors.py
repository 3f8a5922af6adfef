"""
CensusMap - Error Taxonomy.
"""
from typing import Any, List, Sequence


class CensusMapError(Exception):
    """Base class for every error raised by censusmap."""


class SourceLoadError(CensusMapError):
    """An input table or geometry file could not be read."""


class KeyConversionError(CensusMapError, ValueError):
    """
    One or more region codes could not be cast to the integer join key.

    Attributes:
        source: Which input the codes came from ('attributes' or 'geometries').
        values: The offending raw values (first few only in the message).
    """

    def __init__(self, source: str, values: Sequence[Any]):
        self.source = source
        self.values: List[Any] = list(values)
        preview = self.values[:5]
        more = f" (+{len(self.values) - 5} more)" if len(self.values) > 5 else ""
        super().__init__(
            f"{len(self.values)} region code(s) in {source} are not valid "
            f"integers: {preview}{more}"
        )


class JoinIntegrityError(CensusMapError):
    """The join would not preserve one output row per geometry."""


class EmptySliceWarning(UserWarning):
    """A year/parent-region filter matched no rows."""
