"""Module de matching des URL."""

from lapasserelle.matching.schema import CategoryEntry, LoopEntry, MappingOutcome, MatchResult, Record

__all__ = ["CategoryEntry", "LoopEntry", "MappingOutcome", "MatchResult", "Record"]
