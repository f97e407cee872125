"""Users app package.

Custom user model with roles, email/password and one-time-code
authentication flows. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
