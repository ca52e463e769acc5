from django.contrib.auth.models import UserManager as DjangoUserManager


class UserManager(DjangoUserManager):

    def create_admin(self, username, email, password, full_name="", **extra_fields):
        """Admin accounts are created out-of-band (command line, fixtures)."""
        extra_fields.setdefault("is_staff", True)
        extra_fields["full_name"] = full_name
        return self.create_user(username, email, password, **extra_fields)

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("full_name", username)
        return super().create_superuser(username, email, password, **extra_fields)
