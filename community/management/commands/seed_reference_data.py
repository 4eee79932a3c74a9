from datetime import datetime, time

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from community.models import Module, VaultResource, CalendarEvent
from community.storage import create_placeholder_files, vault_url

MODULES = [
    ("Module 1: The Mindset Shift", "45m", False),
    ("Module 2: Analyzing Your Report", "60m", False),
    ("Module 3: Factual Disputing 101", "90m", False),
    ("Module 4: Advanced FCRA Tactics", "120m", True),
    ("Module 5: Taking Them To Court", "90m", True),
]

VAULT = [
    ("The Nuclear Option: Section 609 Template", "The master letter to demand validation.",
     "section-609.pdf", "Disputes"),
    ("Inquiry Removal Script", "Phone script to get inquiries deleted in 24 hours.",
     "inquiry-removal.pdf", "Inquiries"),
    ("Medical Debt HIPAA Loophole", "HIPAA violations are your best friend.",
     "medical-debt.pdf", "Medical"),
    ("Cease & Desist Letter", "Stop the harassment immediately.",
     "cease-desist.pdf", "Collections"),
    ("Validation of Debt (VOD) 1.0", "First round attack.",
     "vod-template.pdf", "Collections"),
]

# (day of current month, title, hour, minute, type); times are US Eastern in the UI copy
EVENTS = [
    (12, "Live Q&A with Debt Eraser", 19, 0, CalendarEvent.TYPE_LIVE),
    (25, "Guest Speaker: Consumer Attorney", 18, 0, CalendarEvent.TYPE_LIVE),
    (5, "New Doc Drop", 12, 0, CalendarEvent.TYPE_DROP),
]


class Command(BaseCommand):
    help = "Load the classroom modules, vault templates and this month's calendar. Safe to run again."

    def handle(self, *args, **options):
        create_placeholder_files()
        today = timezone.localdate()

        with transaction.atomic():
            for index, (title, duration, locked) in enumerate(MODULES, start=1):
                Module.objects.update_or_create(
                    title=title,
                    defaults={'duration': duration, 'locked': locked, 'order_index': index},
                )

            for title, description, filename, category in VAULT:
                VaultResource.objects.update_or_create(
                    title=title,
                    defaults={
                        'description': description,
                        'file_type': VaultResource.TYPE_PDF,
                        'file_url': vault_url(filename),
                        'category': category,
                    },
                )

            for day, title, hour, minute, event_type in EVENTS:
                when = timezone.make_aware(datetime.combine(today.replace(day=day), time(hour, minute)))
                CalendarEvent.objects.update_or_create(
                    title=title,
                    date__year=when.year,
                    date__month=when.month,
                    defaults={'date': when, 'type': event_type},
                )

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(MODULES)} modules, {len(VAULT)} vault resources and {len(EVENTS)} events."
        ))
