"""
URL configuration for the athlete_unknown_api project.
"""

from django.urls import path
from django_prometheus import exports

from athlete_unknown_app.auth import basic_auth_required

from .api import api


# The metrics endpoint
@basic_auth_required
def secured_metrics_view(request):
    return exports.ExportToDjangoView(request)


urlpatterns = [
    path("api/", api.urls),
    path("metrics/", secured_metrics_view, name="metrics"),
]
