"""
Integrations URL Configuration

- /api/integrations/calendar/credentials/
- /api/integrations/calendar/credentials/{type}/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CalendarCredentialViewSet

app_name = 'integrations'

router = DefaultRouter()
router.register(r'calendar/credentials', CalendarCredentialViewSet, basename='calendar-credential')

urlpatterns = [
    path('', include(router.urls)),
]
