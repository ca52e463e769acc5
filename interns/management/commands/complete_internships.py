from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from interns.services import complete_finished_internships


class Command(BaseCommand):
    help = "Mark Active internships whose leaving date has passed as Completed."

    def add_arguments(self, parser):
        parser.add_argument(
            "--as-of",
            help="Treat this date (YYYY-MM-DD) as today.",
        )

    def handle(self, *args, **options):
        today = None
        if options["as_of"]:
            today = parse_date(options["as_of"])
            if today is None:
                raise CommandError("--as-of must be a YYYY-MM-DD date")

        completed = complete_finished_internships(today)
        self.stdout.write(self.style.SUCCESS(f"Completed internships: {completed}"))
