from __future__ import annotations

from typing import Sequence


class BulkKMeansError(Exception):
    """Base class for every error raised by bulkkmeans."""


class ConfigurationError(BulkKMeansError, ValueError):
    """Invalid run setup detected before any round runs."""


class DataFormatError(BulkKMeansError, ValueError):
    """Malformed point or centroid records from an input source."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class StarvedCentroidWarning(UserWarning):
    """One or more centroid ids received no points in a round and kept their position."""

    def __init__(self, round_no: int, ids: Sequence[int]):
        self.round_no = int(round_no)
        self.ids = tuple(int(i) for i in ids)
        super().__init__(f"round {self.round_no}: starved centroid ids {list(self.ids)}")
