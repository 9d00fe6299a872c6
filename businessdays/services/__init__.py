"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .business_date import BusinessDateService, format_utc

__all__ = ["BusinessDateService", "format_utc"]
