# cplcore/apps/dashboard/services/importer.py
from __future__ import annotations

import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from cplcore.apps.registration.images import is_image_data_url
from cplcore.apps.registration.models import ROLES, Player

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("name", "role", "mobile", "imageDataUrl", "createdAt")
_MOBILE_RE = re.compile(r"^[0-9]{10}$")


class ImportPayloadError(ValueError):
    """El archivo no es JSON válido."""


@dataclass
class ImportResult:
    replaced: bool = False
    dry_run: bool = False
    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return self.created + self.updated

    def summary(self) -> str:
        mode = "replace" if self.replaced else "merge"
        return (
            f"{mode}: {self.created} created, {self.updated} updated, "
            f"{self.deleted} deleted, {self.skipped} skipped"
        )


# ======================
# Parseo
# ======================

def parse_payload(raw) -> List[Any]:
    """
    bytes/str -> lista de entradas.
    Un JSON válido que no sea lista se trata como lista vacía.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ImportPayloadError("Invalid JSON file.") from exc
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ImportPayloadError("Invalid JSON file.") from exc
    return data if isinstance(data, list) else []


def _parse_created_at(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        dt = parse_datetime(value.strip())
    except ValueError:
        return None
    if dt is None:
        return None
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return dt


def _parse_uid(value: Any) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def clean_entry(entry: Any) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Devuelve (entrada_limpia, None) o (None, motivo_de_descarte).
    Requiere name/role/mobile/imageDataUrl/createdAt no vacíos; además
    descarta roles desconocidos, móviles mal formados y fechas ilegibles.
    """
    if not isinstance(entry, dict):
        return None, "entry is not an object"
    missing = [k for k in REQUIRED_KEYS if not entry.get(k)]
    if missing:
        return None, f"missing {', '.join(missing)}"

    name = str(entry["name"]).strip()
    role = str(entry["role"]).strip()
    mobile = str(entry["mobile"]).strip()
    image = entry["imageDataUrl"]
    created_at = _parse_created_at(entry["createdAt"])

    if not name:
        return None, "empty name"
    if role not in ROLES:
        return None, f"unknown role {role!r}"
    if not _MOBILE_RE.match(mobile):
        return None, f"invalid mobile {mobile!r}"
    if not is_image_data_url(image):
        return None, "imageDataUrl is not an image data URL"
    if created_at is None:
        return None, f"invalid createdAt {entry['createdAt']!r}"

    return {
        "uid": _parse_uid(entry.get("id")),
        "name": name[:120],
        "role": role,
        "mobile": mobile,
        "image_data_url": image,
        "created_at": created_at,
    }, None


def clean_entries(entries: List[Any], result: ImportResult) -> List[Dict[str, Any]]:
    """Filtra entradas y deduplica por móvil (la última del archivo gana)."""
    by_mobile: Dict[str, Dict[str, Any]] = {}
    for idx, entry in enumerate(entries, start=1):
        clean, reason = clean_entry(entry)
        if clean is None:
            result.skipped += 1
            result.warnings.append(f"entry {idx}: {reason}")
            continue
        by_mobile[clean["mobile"]] = clean
    return list(by_mobile.values())


# ======================
# Escritura
# ======================

def _assign_uid(item: Dict[str, Any], taken: set, owner: Optional[Player] = None) -> uuid.UUID:
    uid = item["uid"]
    if uid is None or (uid in taken and (owner is None or owner.uid != uid)):
        uid = uuid.uuid4()
    taken.add(uid)
    return uid


def _replace(items: List[Dict[str, Any]], result: ImportResult) -> None:
    result.deleted, _ = Player.objects.all().delete()
    taken: set = set()
    objs = []
    for item in items:
        objs.append(Player(
            uid=_assign_uid(item, taken),
            name=item["name"],
            role=item["role"],
            mobile=item["mobile"],
            image_data_url=item["image_data_url"],
            created_at=item["created_at"],
        ))
    Player.objects.bulk_create(objs)
    result.created = len(objs)


def _merge(items: List[Dict[str, Any]], result: ImportResult) -> None:
    existing = {p.mobile: p for p in Player.objects.all()}
    taken = {p.uid for p in existing.values()}
    for item in items:
        player = existing.get(item["mobile"])
        if player is None:
            player = Player(
                uid=_assign_uid(item, taken),
                mobile=item["mobile"],
            )
            result.created += 1
        else:
            if item["uid"] is not None and item["uid"] != player.uid and item["uid"] not in taken:
                taken.discard(player.uid)
                player.uid = item["uid"]
                taken.add(player.uid)
            result.updated += 1
        player.name = item["name"]
        player.role = item["role"]
        player.image_data_url = item["image_data_url"]
        player.created_at = item["created_at"]
        player.save()
        existing[player.mobile] = player


@transaction.atomic
def import_players(raw, *, replace: bool = False, dry_run: bool = False) -> ImportResult:
    """
    Importa un JSON exportado por el panel.
    - replace=True: borra todo y carga las entradas válidas.
    - replace=False (merge): por móvil, el archivo gana sobre lo existente.
    - dry_run: ejecuta dentro de la transacción y hace rollback.
    Lanza ImportPayloadError si el archivo no es JSON.
    """
    entries = parse_payload(raw)
    result = ImportResult(replaced=replace, dry_run=dry_run)
    items = clean_entries(entries, result)

    if replace:
        _replace(items, result)
    else:
        _merge(items, result)

    if dry_run:
        transaction.set_rollback(True)

    for w in result.warnings:
        logger.warning("Import: %s", w)
    logger.info("Import finished (%s%s)", result.summary(), ", dry-run" if dry_run else "")
    return result
