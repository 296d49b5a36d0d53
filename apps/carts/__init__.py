"""Carts app package.

Per-user working set of prospective rental items. Lines are priced from the
catalog when added or updated; nothing here holds stock, the reservation
happens at checkout in ``apps.bookings``.
"""
