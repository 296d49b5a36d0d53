"""Catalog app package.

Holds the rentable assets (counted physical stock billed per day) and the
services (billed per unit) that users put into their carts. Stock is read
by everyone but only the reservation engine in ``apps.bookings`` changes it.
"""
