from __future__ import annotations

import uuid
from datetime import datetime

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone


ROLE_CHOICES = (
    ("Batsman", "Batsman"),
    ("Bowler", "Bowler"),
    ("All-Rounder", "All-Rounder"),
    ("Wicket-Keeper", "Wicket-Keeper"),
)
ROLES = tuple(value for value, _ in ROLE_CHOICES)

mobile_validator = RegexValidator(r"^[0-9]{10}$", "Enter a valid 10-digit number.")


def duplicate_mobile_exists(mobile: str, *, exclude_pk: int | None = None) -> bool:
    qs = Player.objects.filter(mobile=mobile)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


class Player(models.Model):
    """Jugador inscrito en la CPL.
    La foto se guarda embebida como data URL (data:image/...;base64,...),
    igual que en los JSON de export/import.
    """
    uid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    name = models.CharField(max_length=120)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES)
    mobile = models.CharField(max_length=10, unique=True, validators=[mobile_validator])
    image_data_url = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self) -> str:
        return f"{self.name} · {self.role} · {self.mobile}"

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Name is required."})
        if self.image_data_url and not self.image_data_url.startswith("data:image/"):
            raise ValidationError({"image_data_url": "Image must be an embedded data URL."})
        if self.mobile and duplicate_mobile_exists(self.mobile, exclude_pk=self.pk):
            raise ValidationError({"mobile": "This mobile number is already registered."})

    def to_export_dict(self) -> dict:
        # Mismo formato (camelCase) que el JSON exportado por el panel
        return {
            "id": str(self.uid),
            "name": self.name,
            "role": self.role,
            "mobile": self.mobile,
            "imageDataUrl": self.image_data_url,
            "createdAt": self.created_at.isoformat(),
        }


class RegistrationWindow(models.Model):
    """Fila única (pk=1) con el deadline de inscripción."""
    deadline = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "registration window"

    def __str__(self) -> str:
        if self.deadline is None:
            return "No deadline set"
        return f"Deadline {timezone.localtime(self.deadline):%Y-%m-%d %H:%M}"

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "RegistrationWindow":
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj

    def is_open(self, now: datetime | None = None) -> bool:
        if self.deadline is None:
            return True
        now = now or timezone.now()
        # Cerrado sólo cuando ya pasó (estrictamente) el deadline
        return now <= self.deadline

    def set_deadline(self, deadline: datetime | None) -> None:
        if deadline is not None and timezone.is_naive(deadline):
            deadline = timezone.make_aware(deadline)
        self.deadline = deadline
        self.save()


def registration_is_open(now: datetime | None = None) -> bool:
    return RegistrationWindow.load().is_open(now)
