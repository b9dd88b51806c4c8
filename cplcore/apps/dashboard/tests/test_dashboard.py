from __future__ import annotations

import json
from io import BytesIO

from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from openpyxl import load_workbook

from cplcore.apps.registration.models import Player, RegistrationWindow
from cplcore.apps.registration.tests.factories import make_player, png_data_url


class PanelTestCase(TestCase):
    def setUp(self):
        session = self.client.session
        session[settings.CPL_ADMIN_SESSION_KEY] = True
        session.save()


class DashboardIndexTest(PanelTestCase):
    @classmethod
    def setUpTestData(cls):
        cls.p1 = make_player(name="Arjun Sharma", role="Batsman", mobile="9000000001")
        cls.p2 = make_player(name="Rohit Rao", role="Bowler", mobile="9000000002")
        cls.p3 = make_player(name="Kiran Iyer", role="Bowler", mobile="9111111113")
        cls.p4 = make_player(name="Deepak Varma", role="Wicket-Keeper", mobile="9000000004")

    def test_stats(self):
        r = self.client.get(reverse("dashboard_index"))
        self.assertEqual(r.status_code, 200)
        stats = r.context["stats"]
        self.assertEqual(stats["total"], 4)
        self.assertEqual(stats["by_role"], {
            "Batsman": 1,
            "Bowler": 2,
            "All-Rounder": 0,
            "Wicket-Keeper": 1,
        })
        self.assertContains(r, "http://testserver/register/")

    def test_search_by_name_mobile_and_role(self):
        url = reverse("dashboard_index")
        r = self.client.get(url, {"q": "ARJUN"})
        self.assertEqual(r.context["players"], [self.p1])

        r = self.client.get(url, {"q": "91111"})
        self.assertEqual(r.context["players"], [self.p3])

        r = self.client.get(url, {"q": "keeper"})
        self.assertEqual(r.context["players"], [self.p4])

    def test_role_filter(self):
        r = self.client.get(reverse("dashboard_index"), {"role": "Bowler"})
        self.assertEqual(r.context["players"], [self.p2, self.p3])

        r = self.client.get(reverse("dashboard_index"), {"role": "All"})
        self.assertEqual(len(r.context["players"]), 4)

    def test_role_filter_ignores_case(self):
        r = self.client.get(reverse("dashboard_index"), {"q": "arjun", "role": "batsman"})
        self.assertEqual(r.context["players"], [self.p1])

        r = self.client.get(reverse("dashboard_index"), {"role": "BOWLER"})
        self.assertEqual(r.context["players"], [self.p2, self.p3])

    def test_unknown_role_keeps_search(self):
        r = self.client.get(reverse("dashboard_index"), {"q": "arjun", "role": "Captain"})
        self.assertEqual(r.context["players"], [self.p1])

    def test_search_and_filter_combined(self):
        r = self.client.get(reverse("dashboard_index"), {"q": "rao", "role": "Batsman"})
        self.assertEqual(r.context["players"], [])
        self.assertContains(r, "No submissions found.")

    def test_delete(self):
        r = self.client.post(reverse("dashboard_player_delete", args=[self.p2.pk]))
        self.assertRedirects(r, reverse("dashboard_index"))
        self.assertFalse(Player.objects.filter(pk=self.p2.pk).exists())
        self.assertEqual(Player.objects.count(), 3)

    def test_delete_requires_post(self):
        r = self.client.get(reverse("dashboard_player_delete", args=[self.p2.pk]))
        self.assertEqual(r.status_code, 405)
        self.assertTrue(Player.objects.filter(pk=self.p2.pk).exists())

    def test_delete_unknown(self):
        r = self.client.post(reverse("dashboard_player_delete", args=[999999]))
        self.assertEqual(r.status_code, 404)


class DeadlineSettingsTest(PanelTestCase):
    def test_save_and_clear(self):
        url = reverse("dashboard_deadline")
        r = self.client.post(url, {"deadline": "2030-01-15T18:30", "action": "save"})
        self.assertRedirects(r, reverse("dashboard_index"))
        deadline = RegistrationWindow.load().deadline
        self.assertEqual(timezone.localtime(deadline).strftime("%Y-%m-%d %H:%M"), "2030-01-15 18:30")

        r = self.client.get(reverse("dashboard_index"))
        self.assertContains(r, 'value="2030-01-15T18:30"')

        self.client.post(url, {"action": "clear"})
        self.assertIsNone(RegistrationWindow.load().deadline)

    def test_empty_value_clears(self):
        RegistrationWindow.load().set_deadline(timezone.now())
        self.client.post(reverse("dashboard_deadline"), {"deadline": "", "action": "save"})
        self.assertIsNone(RegistrationWindow.load().deadline)

    def test_invalid_value(self):
        r = self.client.post(reverse("dashboard_deadline"), {"deadline": "tomorrow", "action": "save"}, follow=True)
        self.assertContains(r, "Invalid deadline value.")
        self.assertIsNone(RegistrationWindow.load().deadline)


class ExportViewTest(PanelTestCase):
    def test_export_disabled_without_players(self):
        r = self.client.get(reverse("dashboard_export", args=["json"]), follow=True)
        self.assertContains(r, "There are no registrations to export.")

    def test_unknown_format(self):
        make_player()
        r = self.client.get(reverse("dashboard_export", args=["csv"]), follow=True)
        self.assertContains(r, "Unknown export format: csv")

    def test_json(self):
        p = make_player()
        r = self.client.get(reverse("dashboard_export", args=["json"]))
        self.assertEqual(r["Content-Type"], "application/json")
        self.assertIn('filename="cpl-players-', r["Content-Disposition"])
        self.assertIn('.json"', r["Content-Disposition"])
        data = json.loads(r.content)
        self.assertEqual(data, [p.to_export_dict()])

    def test_xlsx(self):
        make_player(name="Arjun Sharma", mobile="9000000001")
        make_player(name="Rohit Rao", role="Bowler", mobile="9000000002")
        r = self.client.get(reverse("dashboard_export", args=["xlsx"]))
        wb = load_workbook(BytesIO(r.content))
        ws = wb["Players"]
        rows = list(ws.iter_rows(values_only=True))
        self.assertEqual(rows[0], ("S.No", "Player Name", "Role", "Mobile Number", "Submission Time"))
        self.assertEqual(rows[1][:4], (1, "Arjun Sharma", "Batsman", "9000000001"))
        self.assertEqual(rows[2][:4], (2, "Rohit Rao", "Bowler", "9000000002"))

    def test_pdf(self):
        make_player()
        make_player(name="Broken Image", mobile="9000000009", image_data_url="data:image/png;base64,AAAA")
        r = self.client.get(reverse("dashboard_export", args=["pdf"]))
        self.assertEqual(r["Content-Type"], "application/pdf")
        self.assertTrue(r.content.startswith(b"%PDF"))

    def test_export_requires_login(self):
        self.client.session.flush()
        self.client.cookies.clear()
        r = self.client.get(reverse("dashboard_export", args=["json"]))
        self.assertEqual(r.status_code, 302)


class ImportViewTest(PanelTestCase):
    def _upload(self, payload, replace=False):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        data = {"file": SimpleUploadedFile("players.json", body, content_type="application/json")}
        if replace:
            data["replace"] = "on"
        return self.client.post(reverse("dashboard_import"), data, follow=True)

    def _entry(self, mobile, name="Imported", role="Bowler"):
        return {
            "id": "",
            "name": name,
            "role": role,
            "mobile": mobile,
            "imageDataUrl": png_data_url(),
            "createdAt": "2025-09-01T10:00:00.000Z",
        }

    def test_merge(self):
        make_player(name="Old Name", mobile="9000000001")
        make_player(name="Untouched", mobile="9000000002")
        r = self._upload([self._entry("9000000001", "New Name"), self._entry("9000000003")])
        self.assertContains(r, "Import successful. 2 imported (1 added, 1 updated).")
        self.assertEqual(Player.objects.count(), 3)
        self.assertEqual(Player.objects.get(mobile="9000000001").name, "New Name")
        self.assertEqual(Player.objects.get(mobile="9000000002").name, "Untouched")

    def test_replace(self):
        make_player(mobile="9000000001")
        make_player(mobile="9000000002")
        r = self._upload([self._entry("9000000005")], replace=True)
        self.assertContains(r, "Import successful.")
        self.assertEqual(list(Player.objects.values_list("mobile", flat=True)), ["9000000005"])

    def test_invalid_json(self):
        make_player(mobile="9000000001")
        r = self._upload(b"{not json")
        self.assertContains(r, "Invalid JSON file.")
        self.assertEqual(Player.objects.count(), 1)

    def test_skipped_entries_reported(self):
        bad = self._entry("9000000007")
        del bad["imageDataUrl"]
        r = self._upload([self._entry("9000000006"), bad])
        self.assertContains(r, "Import successful. 1 imported (1 added, 0 updated, 1 skipped).")

    def test_missing_file(self):
        r = self.client.post(reverse("dashboard_import"), {}, follow=True)
        self.assertContains(r, "Choose a JSON file to import.")
