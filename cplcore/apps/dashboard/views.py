from __future__ import annotations

import logging
from typing import Dict

from django.contrib import messages
from django.db.models import Count
from django.http import HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_GET, require_POST

from cplcore.apps.accounts.auth import admin_required
from cplcore.apps.registration.models import ROLES, Player, RegistrationWindow

from .forms import DeadlineForm, ImportForm, PlayerFilterForm
from .services.exports import CONTENT_TYPES, build_export, export_filename
from .services.importer import ImportPayloadError, import_players

logger = logging.getLogger(__name__)


# -------- Utilidades --------

def role_counts() -> Dict[str, int]:
    counts = {role: 0 for role in ROLES}
    for row in Player.objects.values("role").annotate(n=Count("id")):
        if row["role"] in counts:
            counts[row["role"]] = row["n"]
    return counts


# -------- Vistas --------

@admin_required
def index(request: HttpRequest) -> HttpResponse:
    """
    Dashboard:
      - Ajustes (deadline + link del formulario)
      - Estadísticas por rol
      - Tabla filtrable (búsqueda + rol), export/import
    """
    window = RegistrationWindow.load()
    filter_form = PlayerFilterForm(request.GET or None)
    players = list(filter_form.filter(Player.objects.all()))
    total = Player.objects.count()

    deadline_form = DeadlineForm(initial={
        "deadline": timezone.localtime(window.deadline) if window.deadline else None,
    })

    ctx = {
        "window": window,
        "filter_form": filter_form,
        "deadline_form": deadline_form,
        "import_form": ImportForm(),
        "players": players,
        "stats": {"total": total, "by_role": role_counts()},
        "form_link": request.build_absolute_uri(reverse("registration_register")),
        "export_formats": ("json", "xlsx", "pdf"),
        "has_players": total > 0,
    }
    return render(request, "dashboard/index.html", ctx)


@admin_required
@require_POST
def deadline_update(request: HttpRequest) -> HttpResponse:
    window = RegistrationWindow.load()
    if request.POST.get("action") == "clear":
        window.set_deadline(None)
        logger.info("Deadline cleared")
        messages.success(request, "Deadline cleared.")
        return redirect("dashboard_index")

    form = DeadlineForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid deadline value.")
        return redirect("dashboard_index")

    # datetime-local vacío equivale a "sin deadline"
    window.set_deadline(form.cleaned_data.get("deadline"))
    logger.info("Deadline set to %s", window.deadline)
    if window.deadline:
        messages.success(request, f"Deadline saved: {timezone.localtime(window.deadline):%d/%m/%Y %H:%M}.")
    else:
        messages.success(request, "Deadline cleared.")
    return redirect("dashboard_index")


@admin_required
@require_POST
def player_delete(request: HttpRequest, pk: int) -> HttpResponse:
    player = get_object_or_404(Player, pk=pk)
    logger.info("Deleting player %s (%s)", player.name, player.mobile)
    player.delete()
    messages.success(request, f"Deleted {player.name}.")
    next_url = request.POST.get("next", "")
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return redirect(next_url)
    return redirect("dashboard_index")


@admin_required
@require_GET
def export(request: HttpRequest, fmt: str) -> HttpResponse:
    if fmt not in CONTENT_TYPES:
        messages.error(request, f"Unknown export format: {fmt}")
        return redirect("dashboard_index")

    # El export siempre incluye todos los registros, no la vista filtrada
    players = list(Player.objects.all())
    if not players:
        messages.error(request, "There are no registrations to export.")
        return redirect("dashboard_index")

    payload = build_export(fmt, players)
    logger.info("Exported %d players as %s", len(players), fmt)
    response = HttpResponse(payload, content_type=CONTENT_TYPES[fmt])
    response["Content-Disposition"] = f'attachment; filename="{export_filename(fmt)}"'
    return response


@admin_required
@require_POST
def import_json(request: HttpRequest) -> HttpResponse:
    form = ImportForm(request.POST, request.FILES)
    if not form.is_valid():
        messages.error(request, "Choose a JSON file to import.")
        return redirect("dashboard_index")

    try:
        result = import_players(form.cleaned_data["file"].read(), replace=form.cleaned_data["replace"])
    except ImportPayloadError:
        messages.error(request, "Invalid JSON file.")
        return redirect("dashboard_index")

    msg = f"Import successful. {result.imported} imported ({result.created} added, {result.updated} updated"
    if result.skipped:
        msg += f", {result.skipped} skipped"
    messages.success(request, msg + ").")
    return redirect("dashboard_index")
