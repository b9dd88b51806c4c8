from datetime import datetime, timedelta, timezone as dt_timezone

from django.test import SimpleTestCase

from cplcore.apps.registration.countdown import (
    NO_DEADLINE,
    countdown_display,
    format_remaining,
    remaining_seconds,
)


class FormatRemainingTest(SimpleTestCase):
    def test_zero_and_negative(self):
        self.assertEqual(format_remaining(0), "00d 00:00:00")
        self.assertEqual(format_remaining(-3600), "00d 00:00:00")

    def test_padding(self):
        self.assertEqual(format_remaining(1), "00d 00:00:01")
        self.assertEqual(format_remaining(24 * 3600 + 3600 + 60 + 1), "01d 01:01:01")

    def test_truncates_fractions(self):
        self.assertEqual(format_remaining(59.9), "00d 00:00:59")

    def test_days_over_two_digits(self):
        self.assertEqual(format_remaining(100 * 24 * 3600), "100d 00:00:00")


class CountdownDisplayTest(SimpleTestCase):
    def setUp(self):
        self.now = datetime(2026, 1, 1, 12, 0, 0, tzinfo=dt_timezone.utc)

    def test_no_deadline(self):
        self.assertEqual(countdown_display(None, self.now), NO_DEADLINE)
        self.assertIsNone(remaining_seconds(None, self.now))

    def test_future_deadline(self):
        deadline = self.now + timedelta(days=2, hours=3, minutes=4, seconds=5)
        self.assertEqual(countdown_display(deadline, self.now), "02d 03:04:05")
        self.assertEqual(remaining_seconds(deadline, self.now), 2 * 86400 + 3 * 3600 + 4 * 60 + 5)

    def test_past_deadline(self):
        deadline = self.now - timedelta(seconds=1)
        self.assertEqual(countdown_display(deadline, self.now), "00d 00:00:00")
        self.assertEqual(remaining_seconds(deadline, self.now), 0)
