"""
Views for the project universe.
"""

from __future__ import annotations

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.universe.services.updates import get_project_updates


@login_required
@require_http_methods(["GET"])
def project_updates(request, project_id: str):
    """Research notes for a project, newest first, with parsed tags."""
    updates = get_project_updates(project_id)
    return JsonResponse(
        {
            "project_id": project_id,
            "count": len(updates),
            "updates": [update.to_dict() for update in updates],
        }
    )
