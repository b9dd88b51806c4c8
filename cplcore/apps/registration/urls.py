from django.urls import path
from .views import register, thank_you

urlpatterns = [
    path('', register, name='registration_register'),
    path('thank-you/', thank_you, name='registration_thank_you'),
]
