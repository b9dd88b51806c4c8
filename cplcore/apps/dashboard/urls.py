from django.urls import path
from . import views

urlpatterns = [
    path("", views.index, name="dashboard_index"),
    path("deadline/", views.deadline_update, name="dashboard_deadline"),
    path("players/<int:pk>/delete/", views.player_delete, name="dashboard_player_delete"),
    path("export/<str:fmt>/", views.export, name="dashboard_export"),
    path("import/", views.import_json, name="dashboard_import"),
]
