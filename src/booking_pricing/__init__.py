"""
Booking Pricing Package

A deterministic pricing engine for therapeutic session bookings.
Resolves Session → Add-ons → Tip into a price breakdown, with complimentary
booking handling.
"""

__version__ = "1.0.0"
