"""
Synthetic Data Module
"""
from .generators import GeneratorConfig, TicketingDataGenerator, generate_demo_data

__all__ = ["GeneratorConfig", "TicketingDataGenerator", "generate_demo_data"]
