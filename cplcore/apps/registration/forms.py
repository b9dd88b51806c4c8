from __future__ import annotations

import re

from django import forms
from django.conf import settings

from .images import ACCEPTED_IMAGE_FORMATS, to_data_url
from .models import ROLE_CHOICES, Player, duplicate_mobile_exists, registration_is_open


def max_image_bytes() -> int:
    return settings.CPL_MAX_IMAGE_MB * 1024 * 1024


class PlayerImageField(forms.ImageField):
    # Sin validador de extensión: el formato lo decide Pillow en clean_image
    default_validators = []


class PlayerRegistrationForm(forms.Form):
    name = forms.CharField(
        max_length=120,
        label="Full Name",
        widget=forms.TextInput(attrs={"placeholder": "Enter your full name", "class": "cpl-input"}),
    )
    role = forms.ChoiceField(
        choices=(("", "Choose your role"),) + ROLE_CHOICES,
        label="Role",
        widget=forms.Select(attrs={"class": "cpl-select", "aria-label": "Select role"}),
    )
    mobile = forms.CharField(
        max_length=20,
        label="Mobile Number",
        widget=forms.TextInput(attrs={
            "placeholder": "10-digit mobile number",
            "inputmode": "numeric",
            "pattern": "[0-9]*",
            "maxlength": "10",
            "class": "cpl-input",
        }),
        help_text="We'll use this to contact you.",
    )
    image = PlayerImageField(
        label="Profile Image",
        widget=forms.ClearableFileInput(attrs={"accept": ",".join(ACCEPTED_IMAGE_FORMATS.values())}),
        error_messages={"invalid_image": "Please upload a JPEG/PNG/WebP image."},
    )

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if not name:
            raise forms.ValidationError("Please enter your full name.")
        return name

    def clean_mobile(self):
        # Igual que el input del form: se descartan los caracteres que no son dígitos
        mobile = re.sub(r"\D", "", self.cleaned_data.get("mobile") or "")
        if not re.fullmatch(r"[0-9]{10}", mobile):
            raise forms.ValidationError("Enter a valid 10-digit number.")
        if duplicate_mobile_exists(mobile):
            raise forms.ValidationError("This mobile number is already registered.")
        return mobile

    def clean_image(self):
        upload = self.cleaned_data.get("image")
        if upload is None:
            return upload
        # Django deja la imagen (PIL) ya verificada en upload.image
        fmt = getattr(getattr(upload, "image", None), "format", None)
        if fmt not in ACCEPTED_IMAGE_FORMATS:
            raise forms.ValidationError("Please upload a JPEG/PNG/WebP image.")
        if upload.size > max_image_bytes():
            raise forms.ValidationError(f"Image must be ≤ {settings.CPL_MAX_IMAGE_MB}MB.")
        self.image_mime = ACCEPTED_IMAGE_FORMATS[fmt]
        return upload

    def clean(self):
        cleaned = super().clean()
        # Re-chequeo del deadline justo antes de guardar
        if not registration_is_open():
            raise forms.ValidationError("Registration is closed. The deadline has passed.")
        return cleaned

    def save(self) -> Player:
        upload = self.cleaned_data["image"]
        upload.seek(0)
        player = Player(
            name=self.cleaned_data["name"],
            role=self.cleaned_data["role"],
            mobile=self.cleaned_data["mobile"],
            image_data_url=to_data_url(upload.read(), self.image_mime),
        )
        player.full_clean()
        player.save()
        return player
