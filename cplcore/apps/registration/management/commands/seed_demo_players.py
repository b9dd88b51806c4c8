from __future__ import annotations

import random
from datetime import timedelta
from io import BytesIO

from django.core.management.base import BaseCommand
from django.utils import timezone
from PIL import Image, ImageDraw

from cplcore.apps.registration.images import to_data_url
from cplcore.apps.registration.models import ROLES, Player, RegistrationWindow

FIRST_NAMES = ["Arjun", "Rohit", "Vikram", "Sanjay", "Kiran", "Rahul", "Ajay", "Suresh", "Manoj", "Deepak"]
LAST_NAMES = ["Sharma", "Reddy", "Kumar", "Naidu", "Rao", "Patel", "Iyer", "Varma"]


def _avatar(initials: str, color: tuple) -> str:
    img = Image.new("RGB", (96, 96), color)
    ImageDraw.Draw(img).text((34, 40), initials, fill=(255, 255, 255))
    buf = BytesIO()
    img.save(buf, format="PNG")
    return to_data_url(buf.getvalue(), "image/png")


class Command(BaseCommand):
    help = "Crea jugadores demo (con avatar PNG) y, opcionalmente, un deadline futuro."

    def add_arguments(self, parser):
        parser.add_argument("--count", type=int, default=12)
        parser.add_argument("--deadline-days", dest="deadline_days", type=int, default=None,
                            help="Si se indica, deadline = ahora + N días.")
        parser.add_argument("--seed", type=int, default=None, help="Semilla para datos reproducibles")

    def handle(self, *args, **opts):
        rng = random.Random(opts["seed"])
        now = timezone.now()
        created = 0

        for i in range(opts["count"]):
            first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
            mobile = f"9{rng.randrange(10**9):09d}"
            if Player.objects.filter(mobile=mobile).exists():
                continue
            color = (rng.randrange(40, 200), rng.randrange(40, 200), rng.randrange(40, 200))
            Player.objects.create(
                name=f"{first} {last}",
                role=ROLES[i % len(ROLES)],
                mobile=mobile,
                image_data_url=_avatar(first[0] + last[0], color),
                created_at=now - timedelta(minutes=rng.randrange(0, 7 * 24 * 60)),
            )
            created += 1

        self.stdout.write(self.style.SUCCESS(f"✓ {created} jugadores demo creados"))

        if opts["deadline_days"] is not None:
            window = RegistrationWindow.load()
            window.set_deadline(now + timedelta(days=opts["deadline_days"]))
            self.stdout.write(self.style.SUCCESS(f"✓ Deadline: {timezone.localtime(window.deadline):%Y-%m-%d %H:%M}"))
