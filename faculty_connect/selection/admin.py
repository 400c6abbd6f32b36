from django.contrib import admin
from .models import SlotCounter, Submission, Selection


class SelectionInline(admin.TabularInline):
    model = Selection
    extra = 0
    readonly_fields = ['subject_id', 'faculty_id']
    can_delete = False


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ['roll_number', 'name', 'email', 'whatsapp_number', 'submitted_at']
    search_fields = ['roll_number', 'name', 'email']
    inlines = [SelectionInline]

    # Deleting here would skip slot restoration; use the delete endpoint instead.
    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(SlotCounter)
class SlotCounterAdmin(admin.ModelAdmin):
    list_display = ['key', 'faculty_id', 'subject_id', 'remaining']
    list_filter = ['subject_id', 'faculty_id']
    readonly_fields = ['key', 'faculty_id', 'subject_id', 'remaining']
