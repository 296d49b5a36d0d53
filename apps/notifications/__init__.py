"""Notifications app package.

In-app notifications for borrowers, approvers and administrators. Booking
and payment events are turned into notifications after their transaction
commits; delivery failures are logged and never undo the change that
caused them.
"""
