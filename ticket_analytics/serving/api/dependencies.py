"""
FastAPI dependencies shared by the route modules.
"""

from fastapi import Depends, Request

from ticket_analytics.analytics import AnalyticsService
from ticket_analytics.store import DocumentStore


def get_store(request: Request) -> DocumentStore:
    """Document store attached to the application during startup"""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Document store not initialized")
    return store


def get_analytics_service(store: DocumentStore = Depends(get_store)) -> AnalyticsService:
    return AnalyticsService(store)
