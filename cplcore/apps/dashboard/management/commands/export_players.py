from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from cplcore.apps.dashboard.services.exports import BUILDERS, build_export, export_filename
from cplcore.apps.registration.models import Player


class Command(BaseCommand):
    help = "Exporta todos los jugadores a JSON, Excel (.xlsx) o PDF."

    def add_arguments(self, parser):
        parser.add_argument("--format", dest="fmt", choices=sorted(BUILDERS), default="json")
        parser.add_argument("--output", type=str, default="", help="Ruta de salida (por defecto: cpl-players-<fecha>.<ext>)")

    def handle(self, *args, **opts):
        fmt = opts["fmt"]
        players = list(Player.objects.all())
        if not players:
            raise CommandError("No hay inscripciones para exportar.")

        out = Path(opts["output"] or export_filename(fmt))
        out.write_bytes(build_export(fmt, players))
        self.stdout.write(self.style.SUCCESS(f"✓ {len(players)} jugadores → {out}"))
