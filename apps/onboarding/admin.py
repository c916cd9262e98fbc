from django.contrib import admin

from .models import ApplicationDocument, Contact, LogEntry, OnboardingApplication, ReviewAction


class ContactInline(admin.TabularInline):
    model = Contact
    extra = 0


class ApplicationDocumentInline(admin.TabularInline):
    model = ApplicationDocument
    extra = 0


@admin.register(OnboardingApplication)
class OnboardingApplicationAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'email', 'status', 'citizenship_type', 'submitted_at', 'reviewed_at')
    list_filter = ('status', 'citizenship_type', 'work_authorization_type')
    search_fields = ('first_name', 'last_name', 'preferred_name', 'email', 'user__username')
    readonly_fields = ('version', 'submitted_at', 'reviewed_at', 'reviewed_by', 'created_at', 'updated_at')
    inlines = [ContactInline, ApplicationDocumentInline]


@admin.register(ReviewAction)
class ReviewActionAdmin(admin.ModelAdmin):
    list_display = ('application', 'action', 'actor', 'created_at')
    list_filter = ('action', 'created_at')
    search_fields = ('application__first_name', 'application__last_name', 'actor__username', 'notes')


@admin.register(LogEntry)
class LogEntryAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'level', 'logger_name', 'message', 'user')
    list_filter = ('level', 'logger_name')
    search_fields = ('message', 'logger_name', 'user__username')
    readonly_fields = ('timestamp', 'logger_name', 'level', 'message', 'user', 'context')
