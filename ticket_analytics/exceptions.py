"""
Service Exceptions

Failures the reporting layer translates into an "analytics temporarily
unavailable" response. Insufficient history is never an error: growth rates
fall back to zeros and forecasts to ``None``.
"""


class AnalyticsError(Exception):
    """Base class for analytics failures surfaced to callers"""


class StoreAccessError(AnalyticsError):
    """A fetch, query, write or delete against the document store failed"""

    def __init__(self, operation: str, collection: str, message: str):
        self.operation = operation
        self.collection = collection
        super().__init__(f"{operation} on '{collection}' failed: {message}")


class RollupComputationError(AnalyticsError):
    """Raw records for a day could not be parsed or reduced into a rollup"""

    def __init__(self, day: str, message: str):
        self.day = day
        super().__init__(f"Rollup for {day} failed: {message}")


class RealtimeSnapshotError(AnalyticsError):
    """Recent raw tickets could not be summarised"""
