from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from crewdesk.models.crew import MAX_AVATAR_SIZE, CrewMember
from crewdesk.models.event import Event
from crewdesk.services.crew_service import CrewService, _avatar_storage_key


class TestAvatarStorageKey:
    def test_with_prefix(self):
        with patch("crewdesk.services.crew_service.settings") as mock_settings:
            mock_settings.storage_prefix = "crewdesk"
            assert _avatar_storage_key("crew", "file", "image/png") == "crewdesk/avatars/crew/file.png"

    def test_without_prefix(self):
        with patch("crewdesk.services.crew_service.settings") as mock_settings:
            mock_settings.storage_prefix = ""
            assert _avatar_storage_key("crew", "file", "image/jpeg") == "avatars/crew/file.jpg"


class TestCrewService:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_storage = MagicMock()
        self.mock_event_repo = MagicMock()
        self.service = CrewService(self.mock_repo, self.mock_storage, self.mock_event_repo)

    def test_create_crew_member(self):
        self.mock_repo.create.side_effect = lambda m: m.model_copy(update={"id": 1, "uuid": "u"})
        member = self.service.create_crew_member("  Omar Saleh ", role="Grip")
        assert member.full_name == "Omar Saleh"
        assert member.role == "Grip"
        self.mock_repo.create.assert_called_once()

    def test_create_requires_name(self):
        with pytest.raises(ValueError, match="Full name is required"):
            self.service.create_crew_member("   ")
        self.mock_repo.create.assert_not_called()

    def test_update_requires_name(self):
        with pytest.raises(ValueError, match="Full name is required"):
            self.service.update_crew_member(CrewMember(id=1, full_name=""))

    def test_get_by_uuid(self):
        self.mock_repo.get_by_uuid.return_value = None
        assert self.service.get_crew_member_by_uuid("nope") is None

    def test_upload_avatar(self):
        member = CrewMember(id=1, uuid="crew-uuid", full_name="Omar")
        self.mock_storage.public_url.return_value = "https://cdn/x.png"

        url = self.service.upload_avatar(member, "me.png", b"png-bytes", "image/png")

        assert url == "https://cdn/x.png"
        key = self.mock_storage.save.call_args.args[0]
        assert "/avatars/crew-uuid/" in key
        assert key.endswith(".png")
        self.mock_repo.update_avatar_url.assert_called_once_with(1, "https://cdn/x.png")
        assert member.avatar_url == "https://cdn/x.png"

    def test_upload_avatar_rejects_type(self):
        member = CrewMember(id=1, uuid="crew-uuid", full_name="Omar")
        with pytest.raises(ValueError, match="Unsupported file type"):
            self.service.upload_avatar(member, "me.gif", b"gif", "image/gif")
        self.mock_storage.save.assert_not_called()

    def test_upload_avatar_rejects_empty(self):
        member = CrewMember(id=1, uuid="crew-uuid", full_name="Omar")
        with pytest.raises(ValueError, match="Empty file"):
            self.service.upload_avatar(member, "me.png", b"", "image/png")

    def test_upload_avatar_rejects_large(self):
        member = CrewMember(id=1, uuid="crew-uuid", full_name="Omar")
        with pytest.raises(ValueError, match="File too large"):
            self.service.upload_avatar(member, "me.png", b"x" * (MAX_AVATAR_SIZE + 1), "image/png")

    def test_upload_avatar_without_storage(self):
        service = CrewService(self.mock_repo)
        with pytest.raises(RuntimeError, match="Storage backend not configured"):
            service.upload_avatar(CrewMember(id=1, full_name="Omar"), "a.png", b"x", "image/png")

    def test_avatar_or_placeholder(self):
        with patch("crewdesk.services.crew_service.settings") as mock_settings:
            mock_settings.avatar_placeholder_url = "/placeholder.jpg"
            assert CrewService.avatar_or_placeholder(CrewMember(full_name="A")) == "/placeholder.jpg"
            assert CrewService.avatar_or_placeholder(CrewMember(full_name="A", avatar_url="/a.png")) == "/a.png"

    def test_list_roster(self):
        amal = CrewMember(id=1, full_name="Amal")
        bilal = CrewMember(id=2, full_name="Bilal")
        chadi = CrewMember(id=3, full_name="Chadi")
        self.mock_repo.list_all.return_value = [amal, bilal, chadi]
        self.mock_event_repo.list_ending_on_or_after.return_value = [
            Event(id=1, title="Shoot A", start_date=date(2024, 3, 1), end_date=date(2024, 3, 3), crew_ids=[1, 2]),
            Event(id=2, title="Shoot B", start_date=date(2024, 3, 5), end_date=date(2024, 3, 6), crew_ids=[1, 3, 2]),
        ]

        roster = self.service.list_roster(date(2024, 3, 2))

        self.mock_event_repo.list_ending_on_or_after.assert_called_once_with(date(2024, 3, 2))
        by_name = {entry.member.full_name: entry for entry in roster}
        assert by_name["Amal"].project_names == ["Shoot A", "Shoot B"]
        assert by_name["Amal"].teammate_ids == [2, 3]
        assert by_name["Chadi"].project_names == ["Shoot B"]
        assert by_name["Chadi"].teammate_ids == [1, 2]

    def test_list_roster_member_without_events(self):
        self.mock_repo.list_all.return_value = [CrewMember(id=9, full_name="Solo")]
        self.mock_event_repo.list_ending_on_or_after.return_value = []
        [entry] = self.service.list_roster(date(2024, 3, 2))
        assert entry.project_names == []
        assert entry.teammate_ids == []

    def test_list_roster_without_event_repo(self):
        with pytest.raises(RuntimeError, match="Event repository not configured"):
            CrewService(self.mock_repo).list_roster(date(2024, 3, 2))
