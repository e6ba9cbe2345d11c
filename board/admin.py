from django.contrib import admin

from board.models import StaffMember, Task


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "email")


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("date", "staff_name", "task_name", "start_hour", "end_hour", "status", "wbs_code")
    list_filter = ("status", "date")
    search_fields = ("staff_name", "task_name", "wbs_code")
