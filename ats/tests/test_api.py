"""
ATS API Tests - Integration tests for the interview scheduling REST API

This module provides API integration tests for:
- Application interview endpoints (schedule, list, invite, debrief)
- Interview endpoints (projections, cancel, reschedule, panel and detail edits)
- Feedback endpoints (submit, update, read, reminders)
- Debrief visibility for interviewers
- Interview process endpoints
- Error envelope

Tests are marked with @pytest.mark.integration for easy categorization.
"""

from datetime import timedelta

import pytest
from django.core import mail
from rest_framework import status

from ats.feedback import FeedbackCollector
from ats.models import InterviewProcess
from ats.scheduling import InterviewLifecycleManager


def schedule_payload(interviewer_payload, when, **extra):
    data = {
        'scheduled_date': when.isoformat(),
        'title': 'Technical Interview',
        'interviewers': interviewer_payload,
        'description': 'Pairing exercise',
        'location': 'Room 4',
    }
    data.update(extra)
    return data


# ============================================================================
# APPLICATION INTERVIEW API TESTS
# ============================================================================

@pytest.mark.integration
@pytest.mark.django_db
class TestApplicationInterviewAPI:
    """Integration tests for interviews nested under an application."""

    def test_unauthenticated(self, api_client, application_factory):
        application = application_factory()
        response = api_client.get(f'/api/ats/applications/{application.pk}/interviews/')
        assert response.status_code in [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN]

    def test_schedule_interview(self, recruiter_client, application_factory, interviewer_payload, tomorrow):
        """Test scheduling returns the new interview and its invite."""
        client, _ = recruiter_client
        application = application_factory()

        response = client.post(
            f'/api/ats/applications/{application.pk}/interviews/',
            schedule_payload(interviewer_payload, tomorrow),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert response.data['application_id'] == str(application.pk)
        interview = response.data['interview']
        assert interview['title'] == 'Screening - Technical Interview'
        assert interview['stage'] == 'screening'
        assert [i['user_id'] for i in interview['interviewers']] == [i['user_id'] for i in interviewer_payload]
        assert response.data['invite']['provider'] == 'other'
        assert 'BEGIN:VCALENDAR' in response.data['invite']['content']

    def test_schedule_requires_write_role(self, api_client, user_factory, application_factory,
                                          interviewer_payload, tomorrow):
        api_client.force_authenticate(user=user_factory())
        application = application_factory()

        response = api_client.post(
            f'/api/ats/applications/{application.pk}/interviews/',
            schedule_payload(interviewer_payload, tomorrow),
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_schedule_validation_error(self, recruiter_client, application_factory, interviewer_payload):
        client, _ = recruiter_client
        application = application_factory()

        response = client.post(
            f'/api/ats/applications/{application.pk}/interviews/',
            {'title': 'Missing date', 'interviewers': interviewer_payload},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error_code'] == 'VALIDATION_ERROR'
        assert 'scheduled_date' in [error['field'] for error in response.data['errors']]

    def test_schedule_too_many_interviewers(self, recruiter_client, application_factory, tomorrow):
        client, _ = recruiter_client
        application = application_factory()
        panel = [{'user_id': str(n), 'name': f'Panelist {n}'} for n in range(11)]

        response = client.post(
            f'/api/ats/applications/{application.pk}/interviews/',
            schedule_payload(panel, tomorrow),
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['meta']['field'] == 'interviewers'
        application.refresh_from_db()
        assert application.interviews == []

    def test_list_interviews(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        application, interview = scheduled_interview

        response = client.get(f'/api/ats/applications/{application.pk}/interviews/')

        assert response.status_code == status.HTTP_200_OK
        assert [i['id'] for i in response.data] == [interview.id]

    def test_download_invite(self, recruiter_client, scheduled_interview):
        """Test the invite is served as an .ics attachment."""
        client, _ = recruiter_client
        application, interview = scheduled_interview

        response = client.get(
            f'/api/ats/applications/{application.pk}/interviews/{interview.id}/invite/'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('text/calendar')
        assert response['Content-Disposition'] == 'attachment; filename="interview_invite.ics"'
        assert response['X-Calendar-Provider'] == 'other'
        assert b'BEGIN:VCALENDAR' in response.content
        assert f"UID:interview-{interview.id}@".encode() in response.content

    def test_invite_for_unknown_interview(self, recruiter_client, application_factory):
        client, _ = recruiter_client
        application = application_factory()

        response = client.get(f'/api/ats/applications/{application.pk}/interviews/missing/invite/')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_application_debrief(self, recruiter_client, scheduled_interview, interviewers):
        client, _ = recruiter_client
        application, interview = scheduled_interview
        FeedbackCollector().submit_feedback(interview.id, {
            'interviewer_id': str(interviewers[0].pk), 'rating': 4, 'decision': 'yes',
        })

        response = client.get(f'/api/ats/applications/{application.pk}/debrief/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['feedback_count'] == 1
        assert response.data['recommendation'] == 'Likely Yes'
        assert response.data['pending_interviewers'] == [str(interviewers[1].pk)]


# ============================================================================
# INTERVIEW API TESTS
# ============================================================================

@pytest.mark.integration
@pytest.mark.django_db
class TestInterviewAPI:
    """Integration tests for interview endpoints."""

    def test_list_interviews(self, recruiter_client, scheduled_interview, application_factory):
        client, _ = recruiter_client
        application, interview = scheduled_interview
        closed = application_factory(status='hired')
        closed.interviews = [dict(interview.to_dict(), id='closed-interview')]
        closed.save()

        response = client.get('/api/ats/interviews/')

        assert response.status_code == status.HTTP_200_OK
        assert [i['id'] for i in response.data] == [interview.id]
        assert response.data[0]['candidate_name'] == application.full_name

    def test_retrieve_interview(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        application, interview = scheduled_interview

        response = client.get(f'/api/ats/interviews/{interview.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == interview.id
        assert response.data['application_id'] == str(application.pk)
        assert response.data['candidate_email'] == application.email
        assert response.data['job_title'] == application.job_title

    def test_not_found_envelope(self, recruiter_client):
        client, _ = recruiter_client

        response = client.get('/api/ats/interviews/does-not-exist/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['success'] is False
        assert response.data['data'] is None
        assert response.data['error_code'] == 'NOT_FOUND'
        assert 'timestamp' in response.data['meta']

    def test_upcoming(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        _, interview = scheduled_interview

        response = client.get('/api/ats/interviews/upcoming/')

        assert response.status_code == status.HTTP_200_OK
        assert [i['id'] for i in response.data] == [interview.id]

    def test_mine(self, api_client, scheduled_interview, interviewers, user_factory):
        _, interview = scheduled_interview

        api_client.force_authenticate(user=interviewers[0])
        response = api_client.get('/api/ats/interviews/mine/')
        assert [i['id'] for i in response.data] == [interview.id]

        api_client.force_authenticate(user=user_factory())
        response = api_client.get('/api/ats/interviews/mine/')
        assert response.data == []

    def test_cancel(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        _, interview = scheduled_interview

        response = client.post(
            f'/api/ats/interviews/{interview.id}/cancel/',
            {'reason': 'Candidate withdrew'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['interview']['status'] == 'cancelled'
        assert response.data['interview']['cancellation_reason'] == 'Candidate withdrew'

    def test_reschedule(self, recruiter_client, scheduled_interview, tomorrow):
        client, _ = recruiter_client
        _, interview = scheduled_interview
        new_date = tomorrow + timedelta(days=2)

        response = client.post(
            f'/api/ats/interviews/{interview.id}/reschedule/',
            {'scheduled_date': new_date.isoformat()},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        stored = InterviewLifecycleManager().get_interview_by_id(interview.id).interview
        assert stored.scheduled_date == new_date
        assert response.data['invite']['provider'] == 'other'

    def test_partial_update(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        _, interview = scheduled_interview

        response = client.patch(
            f'/api/ats/interviews/{interview.id}/',
            {'title': 'System design', 'online_meeting_url': 'https://meet.example.com/abc'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['interview']['title'] == 'System design'
        assert response.data['interview']['online_meeting_url'] == 'https://meet.example.com/abc'

    def test_partial_update_without_fields(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        _, interview = scheduled_interview

        response = client.patch(f'/api/ats/interviews/{interview.id}/', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_replace_interviewers(self, recruiter_client, scheduled_interview, user_factory):
        client, _ = recruiter_client
        _, interview = scheduled_interview
        replacement = user_factory()

        response = client.put(
            f'/api/ats/interviews/{interview.id}/interviewers/',
            {'interviewers': [{'user_id': str(replacement.pk), 'name': 'New Panelist'}]},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['interview']['interviewers'] == [
            {'user_id': str(replacement.pk), 'name': 'New Panelist'}
        ]


# ============================================================================
# FEEDBACK API TESTS
# ============================================================================

@pytest.mark.integration
@pytest.mark.django_db
class TestFeedbackAPI:
    """Integration tests for interview feedback endpoints."""

    def test_submit_own_feedback(self, api_client, scheduled_interview, interviewers):
        _, interview = scheduled_interview
        api_client.force_authenticate(user=interviewers[0])

        response = api_client.post(
            f'/api/ats/interviews/{interview.id}/feedback/',
            {'rating': 5, 'decision': 'definitely_yes', 'considerations': {'Communication': 5}},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['interviewer_id'] == str(interviewers[0].pk)
        assert response.data['decision'] == 'definitely_yes'

    def test_submit_as_someone_else_forbidden(self, api_client, scheduled_interview, interviewers):
        _, interview = scheduled_interview
        api_client.force_authenticate(user=interviewers[0])

        response = api_client.post(
            f'/api/ats/interviews/{interview.id}/feedback/',
            {'interviewer_id': str(interviewers[1].pk), 'rating': 2},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert FeedbackCollector().get_feedback(interview.id) == []

    def test_submit_from_outside_panel_forbidden(self, api_client, scheduled_interview, user_factory):
        _, interview = scheduled_interview
        api_client.force_authenticate(user=user_factory())

        response = api_client.post(
            f'/api/ats/interviews/{interview.id}/feedback/', {'rating': 3}, format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_rating_out_of_range(self, api_client, scheduled_interview, interviewers):
        _, interview = scheduled_interview
        api_client.force_authenticate(user=interviewers[0])

        response = api_client.post(
            f'/api/ats/interviews/{interview.id}/feedback/', {'rating': 9}, format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_and_read_feedback(self, recruiter_client, scheduled_interview, interviewers):
        client, _ = recruiter_client
        _, interview = scheduled_interview
        FeedbackCollector().submit_feedback(interview.id, {
            'interviewer_id': str(interviewers[1].pk), 'rating': 3, 'comments': 'Okay',
        })

        listing = client.get(f'/api/ats/interviews/{interview.id}/feedback/')
        single = client.get(f'/api/ats/interviews/{interview.id}/feedback/{interviewers[1].pk}/')
        missing = client.get(f'/api/ats/interviews/{interview.id}/feedback/{interviewers[0].pk}/')

        assert [e['interviewer_id'] for e in listing.data] == [str(interviewers[1].pk)]
        assert single.data['comments'] == 'Okay'
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    def test_update_own_feedback(self, api_client, scheduled_interview, interviewers):
        _, interview = scheduled_interview
        user = interviewers[0]
        FeedbackCollector().submit_feedback(interview.id, {'interviewer_id': str(user.pk), 'rating': 2})
        api_client.force_authenticate(user=user)

        response = api_client.put(
            f'/api/ats/interviews/{interview.id}/feedback/{user.pk}/',
            {'rating': 4, 'decision': 'yes'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['rating'] == 4

    def test_update_other_feedback_forbidden(self, api_client, scheduled_interview, interviewers):
        _, interview = scheduled_interview
        other = interviewers[1]
        FeedbackCollector().submit_feedback(interview.id, {'interviewer_id': str(other.pk), 'rating': 2})
        api_client.force_authenticate(user=interviewers[0])

        response = api_client.put(
            f'/api/ats/interviews/{interview.id}/feedback/{other.pk}/', {'rating': 5}, format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_remind(self, recruiter_client, scheduled_interview, interviewers):
        client, _ = recruiter_client
        _, interview = scheduled_interview

        response = client.post(f'/api/ats/interviews/{interview.id}/feedback/{interviewers[0].pk}/remind/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert mail.outbox[0].to == [interviewers[0].email]

    def test_remind_requires_role(self, api_client, scheduled_interview, interviewers):
        _, interview = scheduled_interview
        api_client.force_authenticate(user=interviewers[1])

        response = api_client.post(f'/api/ats/interviews/{interview.id}/feedback/{interviewers[0].pk}/remind/')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert mail.outbox == []

    def test_interview_debrief(self, recruiter_client, scheduled_interview, interviewers):
        client, _ = recruiter_client
        _, interview = scheduled_interview
        collector = FeedbackCollector()
        collector.submit_feedback(interview.id, {
            'interviewer_id': str(interviewers[0].pk), 'rating': 4, 'decision': 'no',
            'considerations': {'Communication': 3},
        })

        response = client.get(f'/api/ats/interviews/{interview.id}/debrief/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['recommendation'] == 'Likely No'
        assert response.data['decision_counts'] == {'no': 1}
        assert response.data['consideration_averages'] == {'Communication': 3.0}


# ============================================================================
# DEBRIEF VISIBILITY API TESTS
# ============================================================================

@pytest.mark.integration
@pytest.mark.django_db
class TestDebriefVisibilityAPI:
    """Interviewers read debriefs only when the application opens them."""

    def test_application_debrief_hidden_from_interviewer_by_default(
        self, api_client, scheduled_interview, interviewers
    ):
        application, _ = scheduled_interview
        api_client.force_authenticate(user=interviewers[0])

        response = api_client.get(f'/api/ats/applications/{application.pk}/debrief/')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error_code'] == 'PERMISSION_DENIED'

    def test_interview_debrief_hidden_from_interviewer_by_default(
        self, api_client, scheduled_interview, interviewers
    ):
        _, interview = scheduled_interview
        api_client.force_authenticate(user=interviewers[0])

        response = api_client.get(f'/api/ats/interviews/{interview.id}/debrief/')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_debriefs_open_to_interviewer_when_visible(
        self, api_client, scheduled_interview, interviewers
    ):
        application, interview = scheduled_interview
        FeedbackCollector().submit_feedback(interview.id, {
            'interviewer_id': str(interviewers[1].pk), 'rating': 5, 'decision': 'yes',
        })
        InterviewLifecycleManager().set_interviewer_visibility(application.pk, True)
        api_client.force_authenticate(user=interviewers[0])

        application_response = api_client.get(f'/api/ats/applications/{application.pk}/debrief/')
        interview_response = api_client.get(f'/api/ats/interviews/{interview.id}/debrief/')

        assert application_response.status_code == status.HTTP_200_OK
        assert application_response.data['feedback_count'] == 1
        assert interview_response.status_code == status.HTTP_200_OK
        assert interview_response.data['recommendation'] == 'Likely Yes'

    def test_recruiter_sees_debrief_while_hidden(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        application, interview = scheduled_interview
        assert application.interviewer_visibility is False

        assert client.get(f'/api/ats/applications/{application.pk}/debrief/').status_code == 200
        assert client.get(f'/api/ats/interviews/{interview.id}/debrief/').status_code == 200

    def test_recruiter_toggles_visibility(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        application, _ = scheduled_interview
        url = f'/api/ats/applications/{application.pk}/interviewer-visibility/'
        version = application.version

        response = client.put(url, {'interviewer_visibility': True}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            'application_id': str(application.pk),
            'interviewer_visibility': True,
        }
        application.refresh_from_db()
        assert application.interviewer_visibility is True
        assert application.version == version + 1

        client.put(url, {'interviewer_visibility': False}, format='json')
        application.refresh_from_db()
        assert application.interviewer_visibility is False

    def test_toggle_requires_hiring_role(self, api_client, scheduled_interview, interviewers):
        application, _ = scheduled_interview
        api_client.force_authenticate(user=interviewers[0])

        response = api_client.put(
            f'/api/ats/applications/{application.pk}/interviewer-visibility/',
            {'interviewer_visibility': True},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        application.refresh_from_db()
        assert application.interviewer_visibility is False

    def test_toggle_requires_flag(self, recruiter_client, scheduled_interview):
        client, _ = recruiter_client
        application, _ = scheduled_interview

        response = client.put(
            f'/api/ats/applications/{application.pk}/interviewer-visibility/', {}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_toggle_unknown_application(self, recruiter_client):
        client, _ = recruiter_client

        response = client.put(
            '/api/ats/applications/00000000-0000-0000-0000-000000000000/interviewer-visibility/',
            {'interviewer_visibility': True},
            format='json',
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


# ============================================================================
# INTERVIEW PROCESS API TESTS
# ============================================================================

@pytest.mark.integration
@pytest.mark.django_db
class TestInterviewProcessAPI:
    """Integration tests for interview process templates."""

    def test_create_process(self, recruiter_client, company_factory):
        client, recruiter = recruiter_client
        company = company_factory()

        response = client.post('/api/ats/interview-processes/', {
            'company_id': str(company.pk),
            'job_role_id': 'backend-engineer',
            'stages': [
                {'title': 'Phone screen', 'duration_minutes': 30},
                {'title': 'Onsite', 'considerations': [{'title': 'Design'}]},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['company_id'] == str(company.pk)
        assert response.data['created_by_id'] == recruiter.pk
        assert [s['order'] for s in response.data['stages']] == [0, 1]
        assert response.data['stages'][1]['duration_minutes'] == 60

    def test_create_with_unknown_company(self, recruiter_client):
        client, _ = recruiter_client

        response = client.post('/api/ats/interview-processes/', {
            'company_id': 'nope', 'job_role_id': 'backend-engineer',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['meta']['field'] == 'company_id'

    def test_invalid_duration(self, recruiter_client, company_factory):
        client, _ = recruiter_client

        response = client.post('/api/ats/interview-processes/', {
            'company_id': str(company_factory().pk),
            'job_role_id': 'backend-engineer',
            'stages': [{'title': 'Onsite', 'duration_minutes': 40}],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not InterviewProcess.objects.exists()

    def test_filter_by_job_role(self, recruiter_client, interview_process_factory):
        client, _ = recruiter_client
        wanted = interview_process_factory(job_role_id='designer')
        interview_process_factory(job_role_id='backend-engineer')

        response = client.get('/api/ats/interview-processes/?job_role_id=designer')

        assert response.status_code == status.HTTP_200_OK
        assert [p['id'] for p in response.data] == [str(wanted.pk)]

    def test_update_process(self, recruiter_client, interview_process_factory, interview_stage_factory):
        client, _ = recruiter_client
        process = interview_process_factory()
        interview_stage_factory(process=process, title='Old')

        response = client.put(f'/api/ats/interview-processes/{process.pk}/', {
            'job_role_id': process.job_role_id,
            'stages': [{'title': 'New', 'duration_minutes': 45}],
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert [s['title'] for s in response.data['stages']] == ['New']

    def test_delete_process(self, recruiter_client, interview_process_factory):
        client, _ = recruiter_client
        process = interview_process_factory()

        response = client.delete(f'/api/ats/interview-processes/{process.pk}/')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not InterviewProcess.objects.filter(pk=process.pk).exists()
