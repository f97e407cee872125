"""ASGI config for the Holiday Rentals backend.

This module exposes the ASGI application for ASGI servers. Refer to the
official Django documentation for more information on deploying with ASGI.
"""

import os
from django.core.asgi import get_asgi_application  # type: ignore

# Use the development settings by default. Production servers should set
# DJANGO_SETTINGS_MODULE accordingly.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
