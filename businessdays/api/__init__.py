"""
HTTP boundary - FastAPI application and query parsing.
"""

from .app import create_app
from .params import BusinessDateRequest, parse_query, parse_utc_date

__all__ = ["create_app", "BusinessDateRequest", "parse_query", "parse_utc_date"]
