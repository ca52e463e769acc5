from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .health import health_check

admin.site.site_header = "Internship Management Portal"
admin.site.site_title = "IMS admin"
admin.site.index_title = "Administration"

urlpatterns = [
    path("health/", health_check, name="health"),
    path("admin/", admin.site.urls),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("api/", include("accounts.urls")),
    path("api/", include("interns.urls")),
    path("api/", include("reports.urls")),
    path("api/", include("common.urls")),
]
