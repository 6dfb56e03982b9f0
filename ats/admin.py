"""
ATS Admin - Admin configuration for interview scheduling.
"""

from django.contrib import admin

from .models import Application, Company, InterviewProcess, InterviewStage


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'calendar_provider', 'created_at']
    list_filter = ['calendar_provider']
    search_fields = ['name']


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = [
        'full_name', 'email', 'job_title', 'status',
        'interview_count', 'interviewer_visibility', 'version',
    ]
    list_filter = ['status', 'company', 'interviewer_visibility']
    search_fields = ['first_name', 'last_name', 'email', 'job_title']
    readonly_fields = ['id', 'version', 'created_at', 'updated_at']

    def interview_count(self, obj):
        return len(obj.interviews or [])
    interview_count.short_description = 'Interviews'


class InterviewStageInline(admin.TabularInline):
    model = InterviewStage
    extra = 1
    ordering = ['order']


@admin.register(InterviewProcess)
class InterviewProcessAdmin(admin.ModelAdmin):
    list_display = ['job_role_id', 'company', 'stage_count', 'created_by', 'created_at']
    list_filter = ['company']
    search_fields = ['job_role_id']
    inlines = [InterviewStageInline]
    readonly_fields = ['id', 'created_at', 'updated_at']

    def stage_count(self, obj):
        return obj.stages.count()
