"""
ATS ViewSets - REST API endpoints for interview scheduling

This module provides ViewSets for:
- Applications (schedule and list interviews, invite download, debrief)
- Interviews (cancel, reschedule, interviewer and detail updates, projections)
- Interview feedback (submit, update, read, reminders, summaries)
- Interview process templates

Interviews live inside their application, so these ViewSets delegate to
the service layer instead of querying interview rows directly.

Security Features:
- RBAC permission checking for recruiter/hiring manager roles
- Interviewers may only write their own feedback
"""

import logging

from django.core.exceptions import ValidationError
from django.http import HttpResponse
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.exceptions import InvalidInputError, PermissionDeniedError
from ats.directory import UserDirectory
from ats.feedback import FeedbackCollector
from ats.models import Company, InterviewProcess
from ats.permissions import CanSendFeedbackReminder, IsRecruiterOrHiringManager
from ats.processes import InterviewProcessService
from ats.scheduling import InterviewLifecycleManager
from ats.serializers import (
    FeedbackEntrySerializer,
    FeedbackSubmitSerializer,
    FeedbackSummarySerializer,
    InterviewCancelSerializer,
    InterviewInterviewersSerializer,
    InterviewListingSerializer,
    InterviewProcessSerializer,
    InterviewRescheduleSerializer,
    InterviewScheduleSerializer,
    InterviewSerializer,
    InterviewUpdateSerializer,
    InterviewerVisibilitySerializer,
)

logger = logging.getLogger(__name__)


def scheduling_payload(result):
    """Response body for interview mutations."""
    return {
        'success': result.success,
        'message': result.message,
        'application_id': result.application_id,
        'interview': InterviewSerializer(result.interview).data if result.interview else None,
        'invite': result.invite.to_dict() if result.invite else None,
    }


def invite_response(invite):
    """Serve an invite as a downloadable .ics attachment."""
    response = HttpResponse(invite.content, content_type=invite.content_type)
    response['Content-Disposition'] = f'attachment; filename="{invite.filename}"'
    response['X-Calendar-Provider'] = invite.provider
    return response


def ensure_own_feedback(request, interviewer_id):
    if str(interviewer_id) != str(request.user.pk):
        raise PermissionDeniedError("You can only submit feedback as yourself")


def ensure_debrief_visible(request, application):
    """Interviewers without a hiring role see debriefs only when the application allows it."""
    if UserDirectory.get_roles(request.user) & IsRecruiterOrHiringManager.required_roles:
        return
    if not application.interviewer_visibility:
        raise PermissionDeniedError("Feedback for this application is not visible to interviewers")


# ==================== APPLICATION INTERVIEWS ====================

class ApplicationInterviewViewSet(viewsets.ViewSet):
    """
    Interview operations scoped to one application.

    Actions:
    - interviews: GET list / POST schedule
    - invite: Download the calendar invite of one interview
    - debrief: Feedback summary across all interviews
    - interviewer_visibility: Open or close the debrief to interviewers
    """

    permission_classes = [IsAuthenticated, IsRecruiterOrHiringManager]

    def get_manager(self):
        return InterviewLifecycleManager()

    @action(detail=True, methods=['get', 'post'])
    def interviews(self, request, pk=None):
        """List or schedule interviews for the application."""
        manager = self.get_manager()

        if request.method == 'GET':
            interviews = manager.list_interviews_for_application(pk)
            return Response(InterviewSerializer(interviews, many=True).data)

        serializer = InterviewScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = manager.schedule_interview(
            application_id=pk,
            scheduled_date=data['scheduled_date'],
            title=data['title'],
            interviewers=data['interviewers'],
            description=data.get('description', ''),
            process_id=data.get('process_id') or None,
            location=data.get('location') or None,
            online_meeting_url=data.get('online_meeting_url') or None,
            meeting_id=data.get('meeting_id') or None,
            meeting_password=data.get('meeting_password') or None,
        )
        return Response(scheduling_payload(result), status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=['get'],
        url_path=r'interviews/(?P<interview_id>[^/.]+)/invite',
        url_name='interview-invite',
    )
    def invite(self, request, pk=None, interview_id=None):
        """Download the calendar invite for an interview."""
        invite = self.get_manager().generate_interview_invite(pk, interview_id)
        return invite_response(invite)

    @action(detail=True, methods=['get'])
    def debrief(self, request, pk=None):
        """Aggregate feedback across the application's interviews."""
        collector = FeedbackCollector()
        ensure_debrief_visible(request, collector.get_application(pk))
        summary = collector.summarize_application(pk)
        return Response(FeedbackSummarySerializer(summary).data)

    @action(
        detail=True,
        methods=['put'],
        url_path='interviewer-visibility',
        url_name='interviewer-visibility',
    )
    def interviewer_visibility(self, request, pk=None):
        serializer = InterviewerVisibilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = self.get_manager().set_interviewer_visibility(
            pk, serializer.validated_data['interviewer_visibility']
        )
        return Response({
            'application_id': str(application.pk),
            'interviewer_visibility': application.interviewer_visibility,
        })


# ==================== INTERVIEWS ====================

class InterviewViewSet(viewsets.ViewSet):
    """
    ViewSet for interviews across applications.

    list: Interviews on active applications, newest first
    retrieve: Interview with candidate details
    partial_update: Edit title, description and meeting details

    Actions:
    - upcoming: Interviews from today onwards
    - mine: Interviews the current user sits on
    - cancel / reschedule / interviewers
    - feedback: Get/submit feedback
    - remind: Chase an interviewer for feedback
    - debrief: Feedback summary for this interview
    """

    permission_classes = [IsAuthenticated, IsRecruiterOrHiringManager]

    def get_permissions(self):
        if self.action == 'remind':
            return [IsAuthenticated(), CanSendFeedbackReminder()]
        if self.action in ('feedback', 'interviewer_feedback'):
            # Interviewers write their own feedback regardless of role
            return [IsAuthenticated()]
        return super().get_permissions()

    def get_manager(self):
        return InterviewLifecycleManager()

    def get_collector(self):
        return FeedbackCollector()

    def list(self, request):
        listings = self.get_manager().list_active_interviews()
        return Response(InterviewListingSerializer(listings, many=True).data)

    def retrieve(self, request, pk=None):
        listing = self.get_manager().get_interview_by_id(pk)
        return Response(InterviewListingSerializer(listing).data)

    def partial_update(self, request, pk=None):
        serializer = InterviewUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        if not serializer.validated_data:
            raise InvalidInputError("No editable fields supplied")

        result = self.get_manager().update_interview(pk, dict(serializer.validated_data))
        return Response(scheduling_payload(result))

    @action(detail=False, methods=['get'])
    def upcoming(self, request):
        """Interviews scheduled from the start of today, soonest first."""
        listings = self.get_manager().list_upcoming_interviews()
        return Response(InterviewListingSerializer(listings, many=True).data)

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """Interviews where the current user is an interviewer."""
        listings = self.get_manager().list_interviewer_interviews(request.user.pk)
        return Response(InterviewListingSerializer(listings, many=True).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = InterviewCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_manager().cancel_interview(pk, serializer.validated_data['reason'])
        return Response(scheduling_payload(result))

    @action(detail=True, methods=['post'])
    def reschedule(self, request, pk=None):
        serializer = InterviewRescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_manager().reschedule_interview(
            pk, serializer.validated_data['scheduled_date']
        )
        return Response(scheduling_payload(result))

    @action(detail=True, methods=['put'])
    def interviewers(self, request, pk=None):
        """Replace the interview panel."""
        serializer = InterviewInterviewersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_manager().update_interviewers(
            pk, serializer.validated_data['interviewers']
        )
        return Response(scheduling_payload(result))

    # ---------- feedback ----------

    @action(detail=True, methods=['get', 'post'])
    def feedback(self, request, pk=None):
        """Get all feedback or submit the current user's feedback."""
        collector = self.get_collector()

        if request.method == 'GET':
            entries = collector.get_feedback(pk)
            return Response(FeedbackEntrySerializer(entries, many=True).data)

        serializer = FeedbackSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.setdefault('interviewer_id', str(request.user.pk))
        ensure_own_feedback(request, data['interviewer_id'])

        entry = collector.submit_feedback(pk, data)
        return Response(FeedbackEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=['get', 'put'],
        url_path=r'feedback/(?P<interviewer_id>[^/.]+)',
        url_name='interviewer-feedback',
    )
    def interviewer_feedback(self, request, pk=None, interviewer_id=None):
        """Read or replace one interviewer's feedback."""
        collector = self.get_collector()

        if request.method == 'GET':
            entry = collector.get_feedback_by_interviewer(pk, interviewer_id)
            return Response(FeedbackEntrySerializer(entry).data)

        ensure_own_feedback(request, interviewer_id)
        serializer = FeedbackSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        entry = collector.update_feedback(pk, interviewer_id, dict(serializer.validated_data))
        return Response(FeedbackEntrySerializer(entry).data)

    @action(
        detail=True,
        methods=['post'],
        url_path=r'feedback/(?P<interviewer_id>[^/.]+)/remind',
        url_name='feedback-remind',
    )
    def remind(self, request, pk=None, interviewer_id=None):
        """Send a feedback reminder to one interviewer."""
        outcome = self.get_collector().send_feedback_reminder(pk, interviewer_id)
        return Response(outcome)

    @action(detail=True, methods=['get'])
    def debrief(self, request, pk=None):
        collector = self.get_collector()
        ensure_debrief_visible(request, collector.get_interview_application(pk))
        summary = collector.summarize_feedback(pk)
        return Response(FeedbackSummarySerializer(summary).data)


# ==================== INTERVIEW PROCESSES ====================

class InterviewProcessViewSet(viewsets.ModelViewSet):
    """
    ViewSet for interview process templates.

    Stages are replaced wholesale on update; filter by `job_role_id` or
    `company` to find the process for a role.
    """

    serializer_class = InterviewProcessSerializer
    permission_classes = [IsAuthenticated, IsRecruiterOrHiringManager]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['job_role_id', 'company']
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_service(self):
        return InterviewProcessService()

    def get_queryset(self):
        return InterviewProcess.objects.select_related(
            'company', 'created_by'
        ).prefetch_related('stages')

    def get_company(self, request):
        company_id = request.data.get('company_id')
        if not company_id:
            raise InvalidInputError("company_id is required", field_name='company_id')
        try:
            return Company.objects.get(pk=company_id)
        except (Company.DoesNotExist, ValidationError, ValueError):
            raise InvalidInputError(f"Unknown company: {company_id}", field_name='company_id')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        process = self.get_service().create(
            serializer.validated_data,
            company=self.get_company(request),
            created_by=request.user,
        )
        return Response(self.get_serializer(process).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        process = self.get_service().update(kwargs['pk'], serializer.validated_data)
        return Response(self.get_serializer(process).data)

    def destroy(self, request, *args, **kwargs):
        self.get_service().delete(kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)
