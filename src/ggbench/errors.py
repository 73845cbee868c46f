"""
Error taxonomy shared by the scoring core and the apps.

NoPairsAvailable is not an error: ``next_pair`` returns ``None`` for it.
"""


class GGBenchError(Exception):
    pass


class NotFound(GGBenchError):
    """A referenced model, prompt or animation does not exist."""


class ValidationError(GGBenchError):
    """A payload is malformed (missing ids, unknown winner token, ...)."""


class PersistenceConflict(GGBenchError):
    """Concurrent writes kept conflicting after all retries were used."""


class UpstreamUnavailable(GGBenchError):
    """An external dependency (LLM endpoint) failed or timed out."""
