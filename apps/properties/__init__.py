"""Properties app package.

This app encapsulates all functionality related to property listings,
including the property model, media, amenities, moderation status and
related domain services.
"""
