from abc import ABC, abstractmethod
from datetime import date

from crewdesk.models.crew import CrewMember
from crewdesk.models.event import Event
from crewdesk.models.invoice import Invoice
from crewdesk.models.job_order import JobOrder


class CrewRepository(ABC):
    @abstractmethod
    def create(self, member: CrewMember) -> CrewMember: ...

    @abstractmethod
    def get_by_id(self, crew_id: int) -> CrewMember | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> CrewMember | None: ...

    @abstractmethod
    def list_all(self) -> list[CrewMember]: ...

    @abstractmethod
    def list_by_ids(self, crew_ids: list[int]) -> list[CrewMember]: ...

    @abstractmethod
    def update(self, member: CrewMember) -> CrewMember: ...

    @abstractmethod
    def update_avatar_url(self, crew_id: int, avatar_url: str) -> None: ...


class EventRepository(ABC):
    @abstractmethod
    def create(self, event: Event) -> Event: ...

    @abstractmethod
    def get_by_id(self, event_id: int) -> Event | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Event | None: ...

    @abstractmethod
    def list_all(self) -> list[Event]: ...

    @abstractmethod
    def list_by_ids(self, event_ids: list[int]) -> list[Event]: ...

    @abstractmethod
    def list_active_on(self, day: date) -> list[Event]: ...

    @abstractmethod
    def list_ending_on_or_after(self, day: date) -> list[Event]: ...

    @abstractmethod
    def update(self, event: Event) -> Event: ...

    @abstractmethod
    def update_file_url(self, event_id: int, file_url: str) -> None: ...

    @abstractmethod
    def delete(self, event_id: int) -> None: ...


class JobOrderRepository(ABC):
    @abstractmethod
    def create_many(self, job_orders: list[JobOrder]) -> list[JobOrder]: ...

    @abstractmethod
    def get_by_id(self, job_order_id: int) -> JobOrder | None: ...

    @abstractmethod
    def list_by_crew(self, crew_id: int) -> list[JobOrder]: ...

    @abstractmethod
    def list_by_event(self, event_id: int) -> list[JobOrder]: ...

    @abstractmethod
    def update_rates(self, job_orders: list[JobOrder]) -> None:
        """Persist rate/currency/unit for every job order as one unit of work."""
        ...

    @abstractmethod
    def delete_for_event_crew(self, event_id: int, crew_ids: list[int]) -> None: ...


class InvoiceRepository(ABC):
    @abstractmethod
    def create(self, invoice: Invoice) -> Invoice: ...

    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Invoice | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Invoice | None: ...

    @abstractmethod
    def list_by_crew(self, crew_id: int) -> list[Invoice]: ...
