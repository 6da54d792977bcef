from __future__ import annotations

import logging
from datetime import date

from ulid import ULID

from crewdesk.models.crew import ALLOWED_AVATAR_TYPES, MAX_AVATAR_SIZE, CrewMember, CrewRosterEntry
from crewdesk.repositories.base import CrewRepository, EventRepository
from crewdesk.settings import settings
from crewdesk.storage.base import StorageBackend

logger = logging.getLogger(__name__)


IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


def _avatar_storage_key(crew_uuid: str, file_uuid: str, content_type: str) -> str:
    ext = IMAGE_EXTENSIONS.get(content_type, "")
    prefix = settings.storage_prefix
    if prefix:
        return f"{prefix}/avatars/{crew_uuid}/{file_uuid}{ext}"
    return f"avatars/{crew_uuid}/{file_uuid}{ext}"


class CrewService:
    def __init__(
        self,
        repo: CrewRepository,
        storage: StorageBackend | None = None,
        event_repo: EventRepository | None = None,
    ) -> None:
        self.repo = repo
        self.storage = storage
        self.event_repo = event_repo

    def create_crew_member(
        self,
        full_name: str,
        role: str = "",
        status: str = "active",
        type: str = "",
    ) -> CrewMember:
        full_name = full_name.strip()
        if not full_name:
            raise ValueError("Full name is required")
        member = CrewMember(full_name=full_name, role=role, status=status, type=type)
        result = self.repo.create(member)
        logger.info("Crew member created: id=%s, name=%s", result.id, result.full_name)
        return result

    def list_crew_members(self) -> list[CrewMember]:
        result = self.repo.list_all()
        logger.debug("Listed %d crew members", len(result))
        return result

    def get_crew_member(self, crew_id: int) -> CrewMember | None:
        result = self.repo.get_by_id(crew_id)
        logger.debug("get_crew_member id=%s found=%s", crew_id, result is not None)
        return result

    def get_crew_member_by_uuid(self, uuid: str) -> CrewMember | None:
        result = self.repo.get_by_uuid(uuid)
        logger.debug("get_crew_member_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result

    def update_crew_member(self, member: CrewMember) -> CrewMember:
        if not member.full_name.strip():
            raise ValueError("Full name is required")
        result = self.repo.update(member)
        logger.info("Crew member updated: id=%s, name=%s", result.id, result.full_name)
        return result

    def upload_avatar(self, member: CrewMember, filename: str, data: bytes, content_type: str) -> str:
        """Store an avatar image and point the crew member at its public URL."""
        if self.storage is None:
            raise RuntimeError("Storage backend not configured")
        if member.id is None:
            raise ValueError("Cannot upload avatar for crew member without an id")
        if content_type not in ALLOWED_AVATAR_TYPES:
            raise ValueError(f"Unsupported file type: {content_type}")
        if not data:
            raise ValueError("Empty file")
        if len(data) > MAX_AVATAR_SIZE:
            raise ValueError("File too large")

        key = _avatar_storage_key(member.uuid, str(ULID()), content_type)
        self.storage.save(key, data, content_type=content_type)
        url = self.storage.public_url(key)
        self.repo.update_avatar_url(member.id, url)
        member.avatar_url = url
        logger.info("Avatar uploaded: crew=%s file=%s key=%s", member.uuid, filename, key)
        return url

    @staticmethod
    def avatar_or_placeholder(member: CrewMember) -> str:
        return member.avatar_url.strip() or settings.avatar_placeholder_url

    def list_roster(self, today: date) -> list[CrewRosterEntry]:
        """Every crew member with their upcoming projects and the teammates on them."""
        if self.event_repo is None:
            raise RuntimeError("Event repository not configured")
        members = self.repo.list_all()
        upcoming = self.event_repo.list_ending_on_or_after(today)

        roster: list[CrewRosterEntry] = []
        for member in members:
            member_events = [e for e in upcoming if member.id in e.crew_ids]
            teammates = dict.fromkeys(
                crew_id for e in member_events for crew_id in e.crew_ids if crew_id != member.id
            )
            roster.append(
                CrewRosterEntry(
                    member=member,
                    project_names=[e.title for e in member_events],
                    teammate_ids=list(teammates),
                )
            )
        logger.debug("Roster built: members=%d upcoming_events=%d", len(members), len(upcoming))
        return roster
