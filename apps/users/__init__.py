"""Users app package.

Accounts of the marketplace. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project; authentication is JWT based.
"""
