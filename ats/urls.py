"""
ATS URLs - REST API routing for interview scheduling

Interview routes nested under applications are implemented via @action
decorators in ViewSets. For example:
- GET/POST /api/ats/applications/{uuid}/interviews/
- GET /api/ats/applications/{uuid}/interviews/{interview_id}/invite/
- GET/PUT /api/ats/interviews/{interview_id}/feedback/{interviewer_id}/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    ApplicationInterviewViewSet,
    InterviewProcessViewSet,
    InterviewViewSet,
)

app_name = 'ats'

router = DefaultRouter()

# Applications
router.register(r'applications', ApplicationInterviewViewSet, basename='application')

# Interviews and Feedback
router.register(r'interviews', InterviewViewSet, basename='interview')

# Interview process templates
router.register(r'interview-processes', InterviewProcessViewSet, basename='interview-process')

urlpatterns = [
    path('', include(router.urls)),
]
