from __future__ import annotations

import logging

from django import forms
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .auth import check_admin_credentials, is_panel_admin, login_panel_admin, logout_panel_admin

logger = logging.getLogger(__name__)


class AdminLoginForm(forms.Form):
    username = forms.CharField(
        max_length=150,
        widget=forms.TextInput(attrs={"placeholder": "Enter username", "autocomplete": "username", "class": "cpl-input"}),
    )
    password = forms.CharField(
        widget=forms.PasswordInput(attrs={"placeholder": "Enter password", "autocomplete": "current-password", "class": "cpl-input"}),
    )

    def clean(self):
        cleaned = super().clean()
        if not check_admin_credentials(cleaned.get("username", ""), cleaned.get("password", "")):
            raise forms.ValidationError("Invalid credentials")
        return cleaned


def _safe_next(request, default: str) -> str:
    next_url = request.POST.get("next") or request.GET.get("next") or default
    if url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure()):
        return next_url
    return default


def login(request):
    dashboard_url = reverse("dashboard_index")
    if is_panel_admin(request):
        return redirect(dashboard_url)

    if request.method == "POST":
        form = AdminLoginForm(request.POST)
        if form.is_valid():
            login_panel_admin(request)
            logger.info("Panel login OK from %s", request.META.get("REMOTE_ADDR", "?"))
            return redirect(_safe_next(request, dashboard_url))
        logger.warning("Panel login failed for username=%r", request.POST.get("username", ""))
    else:
        form = AdminLoginForm()

    return render(request, "accounts/login.html", {"form": form, "next": request.GET.get("next", "")})


@require_POST
def logout(request):
    logout_panel_admin(request)
    return redirect("accounts_login")
