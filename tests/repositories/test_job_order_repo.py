from unittest.mock import MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError

from crewdesk.models.job_order import BillingUnit, JobOrder
from crewdesk.repositories.sqlalchemy import SQLAlchemyJobOrderRepository


@pytest.fixture()
def seeded(crew_repo, event_repo, sample_member, sample_event):
    a = crew_repo.create(sample_member(full_name="Amal"))
    b = crew_repo.create(sample_member(full_name="Bilal"))
    event = event_repo.create(sample_event(crew_ids=[a.id, b.id]))
    return event, a, b


class TestJobOrderRepo:
    def test_create_many_assigns_ids(self, job_order_repo: SQLAlchemyJobOrderRepository, seeded):
        event, a, b = seeded
        created = job_order_repo.create_many(
            [
                JobOrder(event_id=event.id, crew_id=a.id, rate=0, currency="AED"),
                JobOrder(event_id=event.id, crew_id=b.id, rate=0, currency="AED"),
            ]
        )
        assert all(j.id is not None for j in created)
        assert len({j.id for j in created}) == 2

    def test_get_by_id(self, job_order_repo: SQLAlchemyJobOrderRepository, seeded):
        event, a, _ = seeded
        [created] = job_order_repo.create_many([JobOrder(event_id=event.id, crew_id=a.id, rate=150000, currency="AED")])
        fetched = job_order_repo.get_by_id(created.id)
        assert fetched is not None
        assert fetched.rate == 150000
        assert fetched.unit == BillingUnit.DAILY

    def test_get_by_id_not_found(self, job_order_repo: SQLAlchemyJobOrderRepository):
        assert job_order_repo.get_by_id(9999) is None

    def test_null_unit_reads_as_daily(self, job_order_repo: SQLAlchemyJobOrderRepository, db_connection, seeded):
        event, a, _ = seeded
        db_connection.execute(
            text(
                "INSERT INTO event_crew_job_orders (event_id, crew_id, rate, currency, unit) "
                "VALUES (:event_id, :crew_id, 5000, 'AED', NULL)"
            ),
            {"event_id": event.id, "crew_id": a.id},
        )
        db_connection.commit()
        [job] = job_order_repo.list_by_crew(a.id)
        assert job.unit == BillingUnit.DAILY

    def test_list_by_crew_and_event(self, job_order_repo: SQLAlchemyJobOrderRepository, seeded):
        event, a, b = seeded
        job_order_repo.create_many(
            [
                JobOrder(event_id=event.id, crew_id=a.id, currency="AED"),
                JobOrder(event_id=event.id, crew_id=b.id, currency="AED"),
            ]
        )
        assert len(job_order_repo.list_by_crew(a.id)) == 1
        assert len(job_order_repo.list_by_event(event.id)) == 2

    def test_update_rates(self, job_order_repo: SQLAlchemyJobOrderRepository, seeded):
        event, a, b = seeded
        created = job_order_repo.create_many(
            [
                JobOrder(event_id=event.id, crew_id=a.id, currency="AED"),
                JobOrder(event_id=event.id, crew_id=b.id, currency="AED"),
            ]
        )
        job_order_repo.update_rates(
            [
                created[0].model_copy(update={"rate": 120000, "unit": BillingUnit.WEEKLY}),
                created[1].model_copy(update={"rate": 90000, "currency": "USD"}),
            ]
        )
        first = job_order_repo.get_by_id(created[0].id)
        second = job_order_repo.get_by_id(created[1].id)
        assert (first.rate, first.unit) == (120000, BillingUnit.WEEKLY)
        assert (second.rate, second.currency) == (90000, "USD")

    def test_update_rates_empty_is_noop(self, job_order_repo: SQLAlchemyJobOrderRepository):
        job_order_repo.update_rates([])

    def test_update_rates_rejects_missing_id(self, job_order_repo: SQLAlchemyJobOrderRepository):
        with pytest.raises(ValueError, match="without an id"):
            job_order_repo.update_rates([JobOrder(event_id=1, crew_id=1)])

    def test_update_rates_all_or_nothing(self, job_order_repo: SQLAlchemyJobOrderRepository, seeded):
        event, a, b = seeded
        created = job_order_repo.create_many(
            [
                JobOrder(event_id=event.id, crew_id=a.id, rate=100, currency="AED"),
                JobOrder(event_id=event.id, crew_id=b.id, rate=200, currency="AED"),
            ]
        )
        # currency is NOT NULL, so the second row fails after the first was written
        bad = created[1].model_copy(update={"rate": 999})
        bad.currency = None
        with pytest.raises(IntegrityError):
            job_order_repo.update_rates([created[0].model_copy(update={"rate": 555}), bad])

        assert job_order_repo.get_by_id(created[0].id).rate == 100
        assert job_order_repo.get_by_id(created[1].id).rate == 200

    def test_update_rates_rolls_back_on_store_error(self):
        conn = MagicMock()
        conn.execute.side_effect = OperationalError("UPDATE", {}, Exception("gone away"))
        repo = SQLAlchemyJobOrderRepository(conn)

        with pytest.raises(OperationalError):
            repo.update_rates([JobOrder(id=1, event_id=1, crew_id=1, rate=100)])

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()

    def test_delete_for_event_crew(self, job_order_repo: SQLAlchemyJobOrderRepository, seeded):
        event, a, b = seeded
        job_order_repo.create_many(
            [
                JobOrder(event_id=event.id, crew_id=a.id, currency="AED"),
                JobOrder(event_id=event.id, crew_id=b.id, currency="AED"),
            ]
        )
        job_order_repo.delete_for_event_crew(event.id, [a.id])
        assert job_order_repo.list_by_crew(a.id) == []
        assert len(job_order_repo.list_by_crew(b.id)) == 1

    def test_delete_for_event_crew_empty_is_noop(self, job_order_repo: SQLAlchemyJobOrderRepository):
        job_order_repo.delete_for_event_crew(1, [])
