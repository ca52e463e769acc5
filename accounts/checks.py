from django.conf import settings
from django.core.checks import Error, register

from .tokens import signing_secret_problem


@register("security")
def check_jwt_signing_secret(app_configs, **kwargs):
    problem = signing_secret_problem(settings.SIMPLE_JWT.get("SIGNING_KEY"))
    if problem is None:
        return []
    return [
        Error(
            problem,
            hint="Set JWT_SECRET to a random value of 32+ characters.",
            id="accounts.E001",
        )
    ]
