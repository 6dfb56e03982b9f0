"""
ATS Serializers - REST API serialization for interview scheduling

This module provides DRF serializers for:
- Interviews embedded in applications (read projections and write requests)
- Interviewer feedback and debrief summaries
- Interview process templates
"""

from rest_framework import serializers

from ats.interviews import FeedbackDecision
from ats.models import InterviewProcess, InterviewStage


# ==================== INTERVIEW SERIALIZERS ====================

class InterviewerSerializer(serializers.Serializer):
    """Interviewer reference; `user_id` is the platform user id."""
    user_id = serializers.CharField(source='participant_id')
    name = serializers.CharField(source='display_name')


class FeedbackEntrySerializer(serializers.Serializer):
    """Stored feedback entry."""
    interviewer_id = serializers.CharField()
    interviewer_name = serializers.CharField()
    rating = serializers.FloatField()
    comments = serializers.CharField()
    decision = serializers.SerializerMethodField()
    considerations = serializers.DictField(child=serializers.FloatField())
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_decision(self, obj):
        return obj.decision.value if obj.decision else None


class InterviewSerializer(serializers.Serializer):
    """Embedded interview record."""
    id = serializers.CharField()
    scheduled_date = serializers.DateTimeField()
    title = serializers.CharField()
    description = serializers.CharField()
    stage = serializers.CharField()
    status = serializers.CharField()
    interviewers = InterviewerSerializer(many=True)
    cancellation_reason = serializers.CharField(allow_null=True)
    location = serializers.CharField(allow_null=True)
    online_meeting_url = serializers.CharField(allow_null=True)
    meeting_id = serializers.CharField(allow_null=True)
    meeting_password = serializers.CharField(allow_null=True)
    process_id = serializers.CharField(allow_null=True)
    feedback = FeedbackEntrySerializer(many=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class InterviewListingSerializer(serializers.Serializer):
    """Interview flattened with candidate details for list views."""
    interview = InterviewSerializer()
    application_id = serializers.CharField()
    candidate_name = serializers.CharField()
    candidate_email = serializers.EmailField()
    job_title = serializers.CharField()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        interview = data.pop('interview')
        interview.update(data)
        return interview


class InterviewerInputSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    name = serializers.CharField()


class InterviewScheduleSerializer(serializers.Serializer):
    """Serializer for scheduling an interview on an application."""
    scheduled_date = serializers.DateTimeField()
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    interviewers = InterviewerInputSerializer(many=True, allow_empty=True)
    process_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    stage = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text='Ignored: the stage is taken from the application status.',
    )
    location = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    online_meeting_url = serializers.URLField(required=False, allow_null=True, allow_blank=True)
    meeting_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    meeting_password = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class InterviewRescheduleSerializer(serializers.Serializer):
    """Serializer for rescheduling an interview."""
    scheduled_date = serializers.DateTimeField()


class InterviewCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class InterviewInterviewersSerializer(serializers.Serializer):
    interviewers = InterviewerInputSerializer(many=True, allow_empty=True)


class InterviewerVisibilitySerializer(serializers.Serializer):
    interviewer_visibility = serializers.BooleanField()


class InterviewUpdateSerializer(serializers.Serializer):
    """Editable interview details."""
    title = serializers.CharField(required=False, max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    online_meeting_url = serializers.URLField(required=False, allow_null=True, allow_blank=True)
    meeting_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    meeting_password = serializers.CharField(required=False, allow_null=True, allow_blank=True)


# ==================== FEEDBACK SERIALIZERS ====================

class FeedbackSubmitSerializer(serializers.Serializer):
    """Interviewer feedback submission."""
    interviewer_id = serializers.CharField(required=False)
    interviewer_name = serializers.CharField(required=False, allow_blank=True)
    rating = serializers.FloatField(min_value=1, max_value=5)
    comments = serializers.CharField(required=False, allow_blank=True, default='')
    decision = serializers.ChoiceField(
        choices=[d.value for d in FeedbackDecision],
        required=False,
        allow_null=True,
    )
    considerations = serializers.DictField(
        child=serializers.FloatField(min_value=0, max_value=5),
        required=False,
        default=dict,
    )


class FeedbackSummarySerializer(serializers.Serializer):
    feedback_count = serializers.IntegerField()
    average_rating = serializers.FloatField()
    consideration_averages = serializers.DictField(child=serializers.FloatField())
    decision_counts = serializers.DictField(child=serializers.IntegerField())
    recommendation = serializers.CharField()
    pending_interviewers = serializers.ListField(child=serializers.CharField())


# ==================== INTERVIEW PROCESS SERIALIZERS ====================

class ConsiderationSerializer(serializers.Serializer):
    title = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, default='')


class InterviewStageSerializer(serializers.ModelSerializer):
    """Interview stage serializer."""
    considerations = ConsiderationSerializer(many=True, required=False)
    order = serializers.IntegerField(required=False, min_value=0)
    duration_minutes = serializers.IntegerField(required=False, min_value=15)

    class Meta:
        model = InterviewStage
        fields = [
            'id', 'title', 'description', 'considerations',
            'email_template', 'order', 'duration_minutes',
        ]
        read_only_fields = ['id']

    def validate_duration_minutes(self, value):
        if value % 15:
            raise serializers.ValidationError("Duration must be a multiple of 15 minutes.")
        return value


class InterviewProcessSerializer(serializers.ModelSerializer):
    """Interview process template with its ordered stages."""
    stages = InterviewStageSerializer(many=True, required=False)
    company_id = serializers.UUIDField(read_only=True)
    created_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = InterviewProcess
        fields = [
            'id', 'job_role_id', 'company_id', 'created_by_id',
            'stages', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'company_id', 'created_by_id', 'created_at', 'updated_at']
