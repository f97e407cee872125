"""Finances app package.

Payment records attached to bookings. Card processing is handled outside
this service; payments are reconciled by administrators.
"""
