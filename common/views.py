import logging

from django.core.files.storage import default_storage
from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.access_policy import AccessPolicy
from accounts.permissions import HasPortalRole
from interns.files import resolve_stored

from .audit import CommonAuditService
from .exceptions import error_body

logger = logging.getLogger(__name__)


class FileDownloadView(APIView):
    permission_classes = [IsAuthenticated, HasPortalRole]
    required_role = (AccessPolicy.ADMIN, AccessPolicy.INTERN)

    @extend_schema(
        description="""
Downloads an uploaded document (LOI, passport photo, signature, NDA).

Admins may fetch any upload. Interns may fetch only the files recorded on
their own application. Names containing path components are refused.
""",
        responses={
            200: OpenApiResponse(response=OpenApiTypes.BINARY, description="File contents"),
            403: OpenApiResponse(description="Access denied"),
            404: OpenApiResponse(description="File not found"),
        },
    )
    def get(self, request, name):
        stored = resolve_stored(name)
        if stored is None:
            logger.warning("Path traversal attempt on file download: %r", name)
            CommonAuditService.log_file_access_denied(request, name, "traversal")
            return Response(error_body("Access denied"), status=status.HTTP_403_FORBIDDEN)

        if not AccessPolicy.can_download_file(request.user, name):
            CommonAuditService.log_file_access_denied(request, name, "not_owner")
            return Response(
                error_body("You do not have permission to access this file"),
                status=status.HTTP_403_FORBIDDEN,
            )

        if not default_storage.exists(stored):
            return Response(error_body("File not found"), status=status.HTTP_404_NOT_FOUND)

        CommonAuditService.log_file_downloaded(request, name)
        logger.info("File %s downloaded by %s:%s", name, request.user.user_type, request.user.pk)
        return FileResponse(default_storage.open(stored, "rb"), as_attachment=True, filename=name)
