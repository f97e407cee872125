"""URL configuration for the Holiday Rentals backend.

The `urlpatterns` list routes URLs to views. It includes both Django admin
and application‑level routers provided by Django Rest Framework and each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

from apps.adminpanel.views import HealthView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health/', HealthView.as_view(), name='health'),
    # API schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='docs'),
    # Application URLs
    path('api/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/properties/', include('apps.properties.urls')),
    path('api/bookings/', include('apps.bookings.urls')),
    path('api/reviews/', include('apps.reviews.urls')),
    path('api/subscriptions/', include('apps.subscriptions.urls')),
    path('api/admin/', include('apps.adminpanel.urls')),
    path('api/media/', include('apps.media.urls')),
    path('api/destinations/', include('apps.destinations.urls')),
    path('api/events/', include('apps.events.urls')),
]
