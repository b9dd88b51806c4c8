from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from cplcore.apps.dashboard.services.importer import ImportPayloadError, import_players


class Command(BaseCommand):
    help = "Importa jugadores desde un JSON exportado por el panel (merge por móvil o reemplazo total)."

    def add_arguments(self, parser):
        parser.add_argument("json_path", type=str, help="Ruta al archivo .json")
        parser.add_argument("--replace", action="store_true", help="Borra los registros actuales antes de importar")
        parser.add_argument("--dry-run", action="store_true", help="Simula sin escribir cambios")

    def handle(self, *args, **options):
        json_path = Path(options["json_path"])
        replace = options.get("replace", False)
        dry_run = options.get("dry_run", False)

        if not json_path.exists():
            raise CommandError(f"Archivo no encontrado: {json_path}")

        try:
            result = import_players(json_path.read_bytes(), replace=replace, dry_run=dry_run)
        except ImportPayloadError as e:
            raise CommandError(f"{json_path}: {e}")

        for w in result.warnings:
            self.stdout.write(self.style.WARNING(f"  · {w}"))

        self.stdout.write(self.style.SUCCESS(
            f"Modo: {'replace' if replace else 'merge'}  ·  importados: {result.imported}  ·  creados: {result.created}  ·  "
            f"actualizados: {result.updated}  ·  borrados: {result.deleted}  ·  descartados: {result.skipped}"
        ))
        if dry_run:
            self.stdout.write(self.style.WARNING("Dry-run: no se guardaron cambios."))
