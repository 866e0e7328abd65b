"""Aggregate application use cases."""

from .listings import notify_listing_created

__all__ = ["notify_listing_created"]
