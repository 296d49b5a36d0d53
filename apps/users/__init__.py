"""Users app package.

This module initializes the users app. It defines a custom user model
that logs in by email and carries one of three roles: borrower
(peminjam), approver and administrator. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project.
"""
