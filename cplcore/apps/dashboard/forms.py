from __future__ import annotations

from django import forms
from django.db.models import Q, QuerySet

from cplcore.apps.registration.models import ROLE_CHOICES, ROLES

DATETIME_LOCAL_FORMAT = "%Y-%m-%dT%H:%M"
ROLE_LOOKUP = {r.lower(): r for r in ("All",) + ROLES}


class RoleFilterField(forms.ChoiceField):
    """Acepta el rol sin importar mayúsculas (``?role=batsman``)."""

    def to_python(self, value):
        value = super().to_python(value).strip()
        return ROLE_LOOKUP.get(value.lower(), value)


class PlayerFilterForm(forms.Form):
    """Búsqueda + filtro por rol (GET). Funciona con datos vacíos."""
    q = forms.CharField(
        required=False,
        label="Search",
        widget=forms.TextInput(attrs={"placeholder": "Search by name, mobile, role...", "class": "cpl-input"}),
    )
    role = RoleFilterField(
        required=False,
        label="Filter by Role",
        choices=(("All", "All"),) + ROLE_CHOICES,
        initial="All",
        widget=forms.Select(attrs={"class": "cpl-select"}),
    )

    def filter(self, qs: QuerySet) -> QuerySet:
        # Cada campo filtra por su cuenta: un valor inválido no anula los demás
        self.is_valid()
        data = getattr(self, "cleaned_data", {})
        term = (data.get("q") or "").strip().lower()
        role = data.get("role") or "All"
        if term:
            qs = qs.filter(Q(name__icontains=term) | Q(mobile__contains=term) | Q(role__icontains=term))
        if role != "All":
            qs = qs.filter(role=role)
        return qs


class DeadlineForm(forms.Form):
    deadline = forms.DateTimeField(
        required=False,
        label="Set/Update Registration Deadline",
        input_formats=[DATETIME_LOCAL_FORMAT, "%Y-%m-%dT%H:%M:%S"],
        widget=forms.DateTimeInput(attrs={"type": "datetime-local", "class": "cpl-input"}, format=DATETIME_LOCAL_FORMAT),
    )


class ImportForm(forms.Form):
    file = forms.FileField(
        label="Import JSON",
        widget=forms.ClearableFileInput(attrs={"accept": "application/json"}),
    )
    replace = forms.BooleanField(
        required=False,
        label="Replace existing data (unchecked = merge)",
    )

