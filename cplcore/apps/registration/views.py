from __future__ import annotations

import logging

from django.db import IntegrityError
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render

from .countdown import countdown_display, remaining_seconds
from .forms import PlayerRegistrationForm, max_image_bytes
from .models import RegistrationWindow

logger = logging.getLogger(__name__)


def home(request: HttpRequest) -> HttpResponse:
    return render(request, "home.html")


def register(request: HttpRequest) -> HttpResponse:
    """
    Formulario público.
    - Si el deadline ya pasó → tarjeta 'Registration Closed' (con countdown).
    - POST válido → guarda y redirige a thank-you.
    """
    window = RegistrationWindow.load()
    if not window.is_open():
        return render(request, "registration/closed.html", status=200)

    if request.method == "POST":
        form = PlayerRegistrationForm(request.POST, request.FILES)
        if form.is_valid():
            try:
                player = form.save()
            except IntegrityError:
                # Otra inscripción con el mismo móvil entró entre el chequeo y el insert
                form.add_error("mobile", "This mobile number is already registered.")
            else:
                logger.info("Player registered: %s (%s)", player.name, player.role)
                return redirect("registration_thank_you")
        if not window.is_open():
            return render(request, "registration/closed.html", status=200)
    else:
        form = PlayerRegistrationForm()

    return render(request, "registration/register.html", {
        "form": form,
        "max_image_mb": max_image_bytes() // (1024 * 1024),
    })


def thank_you(request: HttpRequest) -> HttpResponse:
    return render(request, "registration/thank_you.html")


# -------- API --------
def countdown(request: HttpRequest) -> JsonResponse:
    window = RegistrationWindow.load()
    return JsonResponse({
        "deadline": window.deadline.isoformat() if window.deadline else None,
        "display": countdown_display(window.deadline),
        "closed": not window.is_open(),
        "remaining_seconds": remaining_seconds(window.deadline),
    })


def health(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"ok": True})
