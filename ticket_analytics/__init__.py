"""
Ticket Analytics

Daily rollups, growth rates, summaries and forecasts over ticketing data.
"""

__version__ = "1.0.0"
