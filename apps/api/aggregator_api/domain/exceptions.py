from __future__ import annotations


class AggregationError(Exception):
    """Terminal failure of a single aggregation call. Nothing has been written."""

    not_found = False


class InvalidFilter(AggregationError, ValueError):
    pass


class OutputCollision(AggregationError):
    pass


class EmptySource(AggregationError):
    not_found = True


class NoFilesInRange(AggregationError):
    not_found = True


class NoMatchingNotes(AggregationError):
    not_found = True


class WriteFailure(AggregationError):
    pass
