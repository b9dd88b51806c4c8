from .countdown import countdown_display, remaining_seconds
from .models import RegistrationWindow


def registration_window(request):
    """Deadline y countdown disponibles en todas las plantillas (header)."""
    window = RegistrationWindow.load()
    return {
        "registration_deadline": window.deadline,
        "registration_open": window.is_open(),
        "countdown_text": countdown_display(window.deadline),
        "countdown_remaining": remaining_seconds(window.deadline),
    }
