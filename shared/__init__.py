"""
Shared kernel

Cross-cutting pieces used by every app: domain errors and value objects,
the API response envelope and request infrastructure (rate limiting).
"""
