from django.urls import path

from .views import FileDownloadView

urlpatterns = [
    path("files/<path:name>", FileDownloadView.as_view(), name="file-download"),
]
