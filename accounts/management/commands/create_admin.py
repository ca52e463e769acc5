import getpass

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User
from accounts.serializers import NewPasswordSerializer
from common.sanitizer import sanitize_email, sanitize_username


class Command(BaseCommand):
    help = "Create a portal administrator account."

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument("email")
        parser.add_argument("--full-name", default="", help="Display name.")
        parser.add_argument(
            "--password",
            help="Password to set. Prompted for when omitted.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        username = sanitize_username(options["username"])
        if not username:
            raise CommandError("Invalid username format")
        email = sanitize_email(options["email"])
        if not email:
            raise CommandError("Invalid email address")
        if User.objects.filter(username=username).exists():
            raise CommandError(f"Admin '{username}' already exists")

        password = options["password"] or getpass.getpass("Password: ")
        serializer = NewPasswordSerializer(data={"password": password})
        if not serializer.is_valid():
            raise CommandError("; ".join(serializer.errors["password"]))

        admin = User.objects.create_admin(
            username=username,
            email=email,
            password=password,
            full_name=options["full_name"],
        )
        self.stdout.write(self.style.SUCCESS(f"Created admin {admin.username} (id={admin.pk})"))
