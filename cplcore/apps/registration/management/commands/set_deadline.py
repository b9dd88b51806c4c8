from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from cplcore.apps.registration.countdown import countdown_display
from cplcore.apps.registration.models import RegistrationWindow


class Command(BaseCommand):
    help = "Fija o borra el deadline de inscripción (ISO-8601; sin zona = hora local del sitio)."

    def add_arguments(self, parser):
        parser.add_argument("deadline", nargs="?", default=None, help="Ej. 2026-11-01T18:00 o 2026-11-01T12:30:00Z")
        parser.add_argument("--clear", action="store_true", help="Quita el deadline (inscripción abierta)")

    def handle(self, *args, **opts):
        window = RegistrationWindow.load()

        if opts["clear"]:
            window.set_deadline(None)
            self.stdout.write(self.style.SUCCESS("✓ Deadline borrado"))
            return

        value = opts["deadline"]
        if not value:
            raise CommandError("Indica un deadline o usa --clear.")
        try:
            dt = parse_datetime(value.strip())
        except ValueError:
            dt = None
        if dt is None:
            raise CommandError(f"Fecha inválida: {value!r}")

        window.set_deadline(dt)
        self.stdout.write(self.style.SUCCESS(
            f"✓ Deadline: {timezone.localtime(window.deadline):%Y-%m-%d %H:%M %Z} "
            f"(faltan {countdown_display(window.deadline)})"
        ))
