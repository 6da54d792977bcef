from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from freezegun import freeze_time

from crewdesk.constants import today
from crewdesk.models.crew import CrewMember
from crewdesk.models.event import Event
from crewdesk.models.job_order import BillingUnit
from crewdesk.services.event_service import EventService, _event_file_storage_key


def _event(**overrides) -> Event:
    defaults = dict(
        id=1,
        uuid="event-uuid",
        title="Desert Shoot",
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 5),
        crew_ids=[1, 2],
    )
    defaults.update(overrides)
    return Event(**defaults)


class TestEventFileStorageKey:
    def test_with_prefix(self):
        with patch("crewdesk.services.event_service.settings") as mock_settings:
            mock_settings.storage_prefix = "crewdesk"
            assert _event_file_storage_key("ev", "f", "application/pdf") == "crewdesk/events/ev/f.pdf"


class TestEventService:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_job_repo = MagicMock()
        self.mock_crew_repo = MagicMock()
        self.mock_storage = MagicMock()
        self.service = EventService(self.mock_repo, self.mock_job_repo, self.mock_crew_repo, self.mock_storage)

    def test_create_event_opens_job_orders(self):
        self.mock_repo.create.side_effect = lambda e: e.model_copy(update={"id": 7, "uuid": "u"})
        with patch("crewdesk.services.event_service.settings") as mock_settings:
            mock_settings.default_currency = "AED"
            event = self.service.create_event(
                " Desert Shoot ",
                date(2024, 3, 1),
                date(2024, 3, 5),
                vehicles=["Van", " ", "Truck "],
                crew_ids=[1, 2, 1],
            )

        assert event.title == "Desert Shoot"
        assert event.vehicles == ["Van", "Truck"]
        assert event.crew_ids == [1, 2]
        jobs = self.mock_job_repo.create_many.call_args.args[0]
        assert [(j.event_id, j.crew_id) for j in jobs] == [(7, 1), (7, 2)]
        assert all(j.rate == 0 and j.currency == "AED" and j.unit == BillingUnit.DAILY for j in jobs)

    def test_create_event_without_crew(self):
        self.mock_repo.create.side_effect = lambda e: e.model_copy(update={"id": 7})
        self.service.create_event("Recce", date(2024, 3, 1), date(2024, 3, 1))
        self.mock_job_repo.create_many.assert_not_called()

    def test_create_requires_title(self):
        with pytest.raises(ValueError, match="Title is required"):
            self.service.create_event("", date(2024, 3, 1), date(2024, 3, 2))
        self.mock_repo.create.assert_not_called()

    def test_create_requires_dates(self):
        with pytest.raises(ValueError, match="Start and end dates are required"):
            self.service.create_event("Shoot", date(2024, 3, 1), None)

    def test_create_rejects_reversed_dates(self):
        with pytest.raises(ValueError, match="must not be after"):
            self.service.create_event("Shoot", date(2024, 3, 2), date(2024, 3, 1))

    def test_update_syncs_job_orders(self):
        self.mock_repo.get_by_id.return_value = _event(crew_ids=[1, 2])
        self.mock_repo.update.side_effect = lambda e: e

        self.service.update_event(_event(crew_ids=[2, 3]))

        self.mock_job_repo.delete_for_event_crew.assert_called_once_with(1, [1])
        jobs = self.mock_job_repo.create_many.call_args.args[0]
        assert [j.crew_id for j in jobs] == [3]

    def test_update_without_crew_change(self):
        self.mock_repo.get_by_id.return_value = _event()
        self.mock_repo.update.side_effect = lambda e: e

        self.service.update_event(_event(title="Renamed"))

        self.mock_job_repo.delete_for_event_crew.assert_called_once_with(1, [])
        self.mock_job_repo.create_many.assert_not_called()

    def test_update_missing_event(self):
        self.mock_repo.get_by_id.return_value = None
        with pytest.raises(ValueError, match="Event not found"):
            self.service.update_event(_event())

    def test_update_without_id(self):
        with pytest.raises(ValueError, match="without an id"):
            self.service.update_event(_event(id=None))

    def test_delete_event(self):
        self.service.delete_event(4)
        self.mock_repo.delete.assert_called_once_with(4)

    def test_attach_file(self):
        self.mock_storage.public_url.return_value = "/uploads/x.pdf"
        event = _event()
        url = self.service.attach_file(event, "callsheet.pdf", b"%PDF", "application/pdf")
        assert url == "/uploads/x.pdf"
        assert "/events/event-uuid/" in self.mock_storage.save.call_args.args[0]
        self.mock_repo.update_file_url.assert_called_once_with(1, "/uploads/x.pdf")
        assert event.file_url == "/uploads/x.pdf"

    def test_attach_file_rejects_type(self):
        with pytest.raises(ValueError, match="Unsupported file type"):
            self.service.attach_file(_event(), "notes.txt", b"hi", "text/plain")

    @freeze_time("2024-03-03 08:00:00")
    def test_list_active(self):
        self.mock_repo.list_active_on.return_value = [_event(crew_ids=[2, 1, 5])]
        self.mock_crew_repo.list_by_ids.return_value = [
            CrewMember(id=1, full_name="Amal"),
            CrewMember(id=2, full_name="Bilal"),
        ]

        [active] = self.service.list_active(today())

        self.mock_repo.list_active_on.assert_called_once_with(date(2024, 3, 3))
        assert active.current_day == "3rd Day"
        assert [m.full_name for m in active.crew] == ["Bilal", "Amal"]

    def test_list_active_first_day(self):
        self.mock_repo.list_active_on.return_value = [_event(crew_ids=[])]
        self.mock_crew_repo.list_by_ids.return_value = []
        [active] = self.service.list_active(date(2024, 3, 1))
        assert active.current_day == "1st Day"
