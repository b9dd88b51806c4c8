from django.contrib import admin
from django.urls import path, include
from cplcore.apps.registration import views as registration_views

urlpatterns = [
    # Admin de Django (staff)
    path("admin/", admin.site.urls),

    # Home
    path("", registration_views.home, name="home"),

    # Formulario público de inscripción
    path("register/", include("cplcore.apps.registration.urls")),

    # API: healthcheck + countdown
    path("api/health/", registration_views.health, name="api_health"),
    path("api/countdown/", registration_views.countdown, name="api_countdown"),

    # Panel CPL (login con credenciales fijas)
    path("admin-panel/", include("cplcore.apps.accounts.urls")),
    path("admin-panel/", include("cplcore.apps.dashboard.urls")),
]
