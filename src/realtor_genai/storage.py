from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from realtor_genai.errors import InvalidInputError
from realtor_genai.providers.base import Database

logger = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 500_000
MAX_TITLE_CHARS = 5_000

CONTENT_TYPES = ("property-listing", "social-media", "email-campaign")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _truncate(value: str, limit: int, label: str) -> str:
    if len(value) > limit:
        logger.warning("%s is very large, truncating to %d characters", label, limit)
        return value[:limit]
    return value


def _with_parsed(item: dict[str, Any], key: str) -> dict[str, Any]:
    raw = item.get(key)
    if not isinstance(raw, str) or not raw:
        return item
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning("failed to parse %s for item %s", key, item.get("id"))
        parsed = None
    return {**item, "parsed_metadata": parsed}


class ProjectStore:
    """Pass-through access to the hosted tables behind the dashboard.

    Rows are plain dicts exactly as the database returns them. Database
    errors are not caught here.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    # Profiles

    def get_profile(self, user_id: str) -> dict[str, Any] | None:
        rows = self.db.table("profiles").select("*").eq("id", user_id).limit(1).execute().data
        return rows[0] if rows else None

    def create_profile(self, user_id: str, data: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """Return the existing profile for ``user_id``, inserting one first if absent."""
        if not user_id:
            raise InvalidInputError("Cannot create profile: userId is missing")
        existing = self.get_profile(user_id)
        if existing is not None:
            return existing
        row = {**(data or {}), "id": user_id}
        rows = self.db.table("profiles").insert(row).execute().data
        logger.info("profile created: %s", user_id)
        return rows[0] if rows else None

    def update_profile(self, user_id: str, updates: dict[str, Any]) -> None:
        self.db.table("profiles").update(updates).eq("id", user_id).execute()

    # Projects

    def add_project(self, project: dict[str, Any]) -> dict[str, Any] | None:
        rows = self.db.table("property_projects").insert(project).execute().data
        return rows[0] if rows else None

    def list_projects(self, user_id: str) -> list[dict[str, Any]]:
        resp = (
            self.db.table("property_projects")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return list(resp.data or [])

    def get_project(self, project_id: str) -> dict[str, Any] | None:
        rows = self.db.table("property_projects").select("*").eq("id", project_id).limit(1).execute().data
        return rows[0] if rows else None

    def update_project(self, project_id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        updates = {**updates, "updated_at": _now_iso()}
        rows = self.db.table("property_projects").update(updates).eq("id", project_id).execute().data
        return rows[0] if rows else None

    def delete_project(self, project_id: str) -> None:
        # Content rows reference the project and go first.
        self.delete_all_project_content(project_id)
        self.db.table("property_projects").delete().eq("id", project_id).execute()

    # Project content

    def save_project_content(
        self,
        project_id: str,
        user_id: str,
        content_type: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not project_id:
            raise InvalidInputError("Cannot save project content: projectId is missing")
        if not user_id:
            raise InvalidInputError("Cannot save project content: userId is missing")
        if content_type not in CONTENT_TYPES:
            raise InvalidInputError(f"Unknown content type: {content_type}")

        row = {
            "project_id": project_id,
            "user_id": user_id,
            "content_type": content_type,
            "content": _truncate(content, MAX_CONTENT_CHARS, "content"),
            "metadata": json.dumps(metadata) if metadata else None,
        }
        rows = self.db.table("project_content").insert(row).execute().data
        if not rows:
            raise RuntimeError("No data returned after saving content")
        logger.info("project content saved: %s", rows[0].get("id"))
        return rows[0]

    def list_project_content(self, project_id: str, content_type: str | None = None) -> list[dict[str, Any]]:
        query = (
            self.db.table("project_content")
            .select("*")
            .eq("project_id", project_id)
            .order("created_at", desc=True)
        )
        if content_type:
            query = query.eq("content_type", content_type)
        rows = query.execute().data or []
        return [_with_parsed(item, "metadata") for item in rows]

    def delete_project_content(self, content_id: str) -> None:
        self.db.table("project_content").delete().eq("id", content_id).execute()

    def delete_all_project_content(self, project_id: str) -> None:
        self.db.table("project_content").delete().eq("project_id", project_id).execute()

    # Generations

    def save_generation(
        self,
        user_id: str,
        content: str,
        type: str,
        metadata: str | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any] | None:
        row = {
            "user_id": user_id,
            "content": _truncate(content, MAX_CONTENT_CHARS, "content"),
            "type": type,
            "title": _truncate(metadata, MAX_TITLE_CHARS, "metadata") if metadata else metadata,
            "project_id": project_id,
        }
        rows = self.db.table("generations").insert(row).execute().data
        return rows[0] if rows else None

    def list_generations(self, user_id: str, type: str | None = None) -> list[dict[str, Any]]:
        query = (
            self.db.table("generations")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        if type:
            query = query.eq("type", type)
        rows = query.execute().data or []
        # Legacy rows keep their JSON metadata in the title column.
        return [_with_parsed(item, "title") for item in rows]

    def delete_generation(self, generation_id: str) -> None:
        self.db.table("generations").delete().eq("id", generation_id).execute()
