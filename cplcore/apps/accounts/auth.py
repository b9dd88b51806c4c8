from __future__ import annotations

import logging
from functools import wraps

from django.conf import settings
from django.contrib.auth.views import redirect_to_login
from django.http import HttpRequest
from django.urls import reverse
from django.utils.crypto import constant_time_compare

logger = logging.getLogger(__name__)


def check_admin_credentials(username: str, password: str) -> bool:
    # Comparamos siempre ambos campos (sin cortocircuito)
    user_ok = constant_time_compare(username or "", settings.CPL_ADMIN_USERNAME)
    pass_ok = constant_time_compare(password or "", settings.CPL_ADMIN_PASSWORD)
    return user_ok and pass_ok


def is_panel_admin(request: HttpRequest) -> bool:
    if request.session.get(settings.CPL_ADMIN_SESSION_KEY) is True:
        return True
    u = request.user
    return bool(u.is_authenticated and u.is_staff)


def login_panel_admin(request: HttpRequest) -> None:
    request.session.cycle_key()
    request.session[settings.CPL_ADMIN_SESSION_KEY] = True


def logout_panel_admin(request: HttpRequest) -> None:
    request.session.pop(settings.CPL_ADMIN_SESSION_KEY, None)


def admin_required(view_func):
    """Sin sesión de panel → login con ?next= la página pedida."""
    @wraps(view_func)
    def _wrapped(request: HttpRequest, *args, **kwargs):
        if not is_panel_admin(request):
            return redirect_to_login(request.get_full_path(), login_url=reverse("accounts_login"))
        return view_func(request, *args, **kwargs)
    return _wrapped
