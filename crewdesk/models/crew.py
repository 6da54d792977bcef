from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CrewMember(BaseModel):
    id: int | None = None
    uuid: str = ""
    full_name: str
    role: str = ""
    status: str = "active"
    type: str = ""
    avatar_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CrewRosterEntry(BaseModel):
    member: CrewMember
    project_names: list[str] = []
    teammate_ids: list[int] = []


ALLOWED_AVATAR_TYPES = {"image/jpeg", "image/png", "image/webp"}
MAX_AVATAR_SIZE = 5 * 1024 * 1024  # 5 MB
