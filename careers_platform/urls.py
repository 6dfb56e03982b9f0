"""
URL configuration for the Careers Platform.

- /api/ats/           interviews, feedback, interview processes
- /api/integrations/  calendar credential administration
- /api/schema/        OpenAPI schema (drf-spectacular)
- /api/token/         JWT authentication (simplejwt)
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path('admin/', admin.site.urls),

    path('api/ats/', include('ats.urls', namespace='ats')),
    path('api/integrations/', include('integrations.urls', namespace='integrations')),

    path('api/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
