"""Bookings app package.

This app encapsulates the booking domain: checkout of a cart into a
booking, the approval lifecycle and the inventory reservation engine that
holds asset stock for pending and confirmed bookings. Stock checks and
decrements run under row locks inside one unit of work, and status
changes are compare-and-swap updates.
"""
