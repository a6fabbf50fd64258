"""
Project updates: processed research notes attached to a project.

Note tags are stored upstream as raw text and parsed per record with
libs.tags.parse_tags, so a malformed tag value only affects its own note.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from apps.universe.models import ProjectUpdate
from libs.errors import degrade_on_store_error
from libs.tags import parse_tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectUpdateItem:
    id: int
    project_id: str
    summary: str | None
    source_document_date: date
    source_document_name: str | None
    note_tags: list[str] | None
    tag_source: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "summary": self.summary,
            "source_document_date": self.source_document_date.isoformat(),
            "source_document_name": self.source_document_name,
            "note_tags": self.note_tags,
            "tag_source": self.tag_source,
        }


@degrade_on_store_error(list, "fetching project updates")
def get_project_updates(project_id: str | None) -> list[ProjectUpdateItem]:
    """
    Notes for a project, newest source document first.

    Args:
        project_id: Human-readable project identifier, e.g. "Polymarket".

    Returns:
        list[ProjectUpdateItem]: Empty when project_id is missing or the
        project has no notes.
    """
    if not project_id:
        return []

    updates = []
    for note in ProjectUpdate.objects.filter(project_id=project_id).order_by(
        "-source_document_date", "id"
    ):
        tags = parse_tags(note.note_tags)
        updates.append(
            ProjectUpdateItem(
                id=note.pk,
                project_id=note.project_id,
                summary=note.summary,
                source_document_date=note.source_document_date,
                source_document_name=note.source_document_name,
                note_tags=tags.as_list(),
                tag_source=tags.source,
            )
        )
    logger.info(f"Fetched {len(updates)} updates for project {project_id!r}")
    return updates
