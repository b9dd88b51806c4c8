from django.conf import settings
from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse

from cplcore.apps.accounts.auth import check_admin_credentials

User = get_user_model()


@override_settings(CPL_ADMIN_USERNAME="captain", CPL_ADMIN_PASSWORD="s3cret!")
class AdminGateTest(TestCase):
    def setUp(self):
        self.login_url = reverse("accounts_login")
        self.dashboard_url = reverse("dashboard_index")

    def test_check_credentials(self):
        self.assertTrue(check_admin_credentials("captain", "s3cret!"))
        self.assertFalse(check_admin_credentials("captain", "wrong"))
        self.assertFalse(check_admin_credentials("Captain", "s3cret!"))
        self.assertFalse(check_admin_credentials("", ""))

    def test_dashboard_requires_login(self):
        r = self.client.get(self.dashboard_url)
        self.assertEqual(r.status_code, 302)
        self.assertTrue(r["Location"].startswith(self.login_url))
        self.assertIn("next=", r["Location"])

    def test_invalid_credentials(self):
        r = self.client.post(self.login_url, {"username": "captain", "password": "nope"})
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, "Invalid credentials")
        self.assertNotIn(settings.CPL_ADMIN_SESSION_KEY, self.client.session)

    def test_login_and_logout(self):
        r = self.client.post(self.login_url, {"username": "captain", "password": "s3cret!"})
        self.assertRedirects(r, self.dashboard_url)
        self.assertIs(self.client.session[settings.CPL_ADMIN_SESSION_KEY], True)

        r = self.client.get(self.dashboard_url)
        self.assertEqual(r.status_code, 200)

        # Ya logueado: el login redirige al dashboard
        r = self.client.get(self.login_url)
        self.assertRedirects(r, self.dashboard_url)

        r = self.client.post(reverse("accounts_logout"))
        self.assertRedirects(r, self.login_url)
        r = self.client.get(self.dashboard_url)
        self.assertEqual(r.status_code, 302)

    def test_logout_requires_post(self):
        r = self.client.get(reverse("accounts_logout"))
        self.assertEqual(r.status_code, 405)

    def test_next_is_honoured_only_for_local_urls(self):
        r = self.client.post(
            f"{self.login_url}?next=/admin-panel/?q=bow",
            {"username": "captain", "password": "s3cret!"},
        )
        self.assertEqual(r["Location"], "/admin-panel/?q=bow")

        self.client.post(reverse("accounts_logout"))
        r = self.client.post(
            f"{self.login_url}?next=https://evil.example.com/",
            {"username": "captain", "password": "s3cret!"},
        )
        self.assertEqual(r["Location"], self.dashboard_url)

    def test_staff_user_passes_gate(self):
        User.objects.create_user(username="staff", password="Pass1234!", is_staff=True)
        self.client.login(username="staff", password="Pass1234!")
        r = self.client.get(self.dashboard_url)
        self.assertEqual(r.status_code, 200)
