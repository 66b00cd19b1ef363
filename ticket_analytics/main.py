"""
FastAPI Production Application

Main entry point for the Ticket Analytics API.
"""

from ticket_analytics.config import get_settings
from ticket_analytics.serving.api import create_api_app

settings = get_settings()

app = create_api_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
