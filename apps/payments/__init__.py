"""Payments app package.

Creates gateway payment sessions for confirmed bookings and reconciles the
gateway's asynchronous notifications against payment and booking state.
Reconciliation is idempotent: duplicate and out-of-order deliveries
converge on one transition and one round of notifications.
"""
