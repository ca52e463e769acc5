import jwt
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from .models import User, UserType
from .tokens import get_signing_secret


class TokenExpired(AuthenticationFailed):
    default_detail = "Your session has expired. Please login again."
    default_code = "TOKEN_EXPIRED"
    error_code = "TOKEN_EXPIRED"


class InvalidPortalToken(AuthenticationFailed):
    default_detail = "Invalid authentication token. Please login again."
    default_code = "INVALID_TOKEN"
    error_code = "INVALID_TOKEN"


def _is_expired(raw_token, secret) -> bool:
    # PyJWT checks the signature before the claims, so only a genuine
    # token can be reported as expired.
    try:
        jwt.decode(raw_token, secret, algorithms=[api_settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        return True
    except jwt.InvalidTokenError:
        return False
    return False


class PortalJWTAuthentication(JWTAuthentication):
    """
    Bearer token authentication for both portal user types.

    The principal is an admin ``User`` or an ``interns.Intern`` row,
    chosen by the ``user_type`` claim.
    """

    www_authenticate_realm = "portal"

    def get_validated_token(self, raw_token):
        secret = get_signing_secret()
        try:
            return AccessToken(raw_token)
        except TokenError:
            if _is_expired(raw_token, secret):
                raise TokenExpired()
            raise InvalidPortalToken()

    def get_user(self, validated_token):
        from interns.models import Intern

        user_id = validated_token.get(api_settings.USER_ID_CLAIM)
        user_type = validated_token.get("user_type")

        if user_type == UserType.ADMIN:
            principal = User.objects.filter(pk=user_id, is_active=True).first()
        elif user_type == UserType.INTERN:
            principal = Intern.objects.filter(pk=user_id).first()
        else:
            principal = None

        if principal is None:
            raise InvalidPortalToken()
        return principal
