"""
ATS Tests Package - Test suite for interview scheduling

Test Modules:
- test_scheduling.py: InterviewLifecycleManager mutations, projections and
  optimistic concurrency
- test_feedback.py: FeedbackCollector upserts, summaries and reminders
- test_processes.py: Interview process template service
- test_api.py: Integration tests for the ATS API endpoints

Test Markers:
- @pytest.mark.integration: API integration tests requiring database

Running Tests:
    # Run all ATS tests
    pytest ats/tests/ -v

    # Run only integration tests
    pytest ats/tests/ -v -m integration
"""
