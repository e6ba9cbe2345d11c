"""URL routes for the board app."""

from django.urls import path

from . import views

app_name = "board"

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    path("slots/", views.time_slots, name="time_slots"),
    # Tasks
    path("tasks/", views.tasks_for_day, name="tasks_for_day"),
    path("tasks/<str:task_id>/", views.task_detail, name="task_detail"),
    path("tasks/<str:task_id>/cycle-status/", views.task_cycle_status, name="task_cycle_status"),
    path("tasks/<str:task_id>/resize/", views.task_resize, name="task_resize"),
    path("stats/", views.day_stats, name="day_stats"),
    path("history/", views.work_history, name="work_history"),
    # Staff
    path("staff/", views.staff_list, name="staff_list"),
    path("staff/provision/", views.staff_provision, name="staff_provision"),
    path("staff/cleanup/", views.staff_cleanup, name="staff_cleanup"),
    path("staff/<str:staff_id>/", views.staff_detail, name="staff_detail"),
    # Attendance selection
    path("attendance/", views.attendance, name="attendance"),
]
