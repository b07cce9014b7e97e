"""Tests for TechniqueService."""

from __future__ import annotations

from datetime import date

import pytest

from rentledger.domain.clock import FixedClock
from rentledger.infrastructure.credentials import Credential
from rentledger.infrastructure.ledger import Ledger
from rentledger.services.result import (
    INVALID_DATE_RANGE,
    NOT_FOUND,
    STALE_WRITE,
    VALIDATION_FAILED,
)
from rentledger.services.techniques import TechniqueService


@pytest.fixture
def svc(ledger: Ledger, credential: Credential) -> TechniqueService:
    return TechniqueService(ledger, credential)


@pytest.fixture
def crane(svc: TechniqueService) -> str:
    result = svc.add(
        name="Crane", monthly_rent="15000", planned_working_days="26", start_date="2024-01-01"
    )
    assert result.ok, result.error
    return result.data["id"]


class TestAdd:
    def test_add_returns_accrual(self, svc: TechniqueService) -> None:
        result = svc.add(
            name="Crane",
            monthly_rent="15000",
            planned_working_days=26,
            start_date="2024-01-01",
            description="Tower crane",
        )
        assert result.ok
        assert result.op == "add_technique"
        d = result.data
        assert d["id"] == "TECH-0001"
        assert d["status"] == "active"
        assert d["end_date"] is None
        assert d["day_offs"] == []
        assert d["daily_rate"] == "576.92"
        assert d["total_accrued_rent"] == "5769.23"
        assert result.meta == {"as_of": "2024-01-10"}

    def test_invalid_input_writes_nothing(self, svc: TechniqueService) -> None:
        result = svc.add(
            name="", monthly_rent="-1", planned_working_days="40", start_date="nope"
        )
        assert not result.ok
        assert result.error.code == VALIDATION_FAILED
        assert set(result.error.detail["fields"]) == {
            "name",
            "monthly_rent",
            "planned_working_days",
            "start_date",
        }
        assert svc.list_techniques().data["count"] == 0

    def test_ids_are_sequential(self, svc: TechniqueService, crane: str) -> None:
        second = svc.add(
            name="Loader", monthly_rent="9000", planned_working_days=22, start_date="2024-01-05"
        )
        assert second.data["id"] == "TECH-0002"


class TestReads:
    def test_list_and_total(self, svc: TechniqueService, crane: str) -> None:
        svc.add(name="Old", monthly_rent="2600", planned_working_days=26, start_date="2024-01-01")
        svc.end("TECH-0002", end_date="2024-01-02")
        result = svc.list_techniques()
        assert result.data["count"] == 2
        assert result.data["total_active_rent"] == "5769.23"

    def test_list_by_status(self, svc: TechniqueService, crane: str) -> None:
        assert svc.list_techniques(status="ended").data["count"] == 0
        assert svc.list_techniques(status="active").data["count"] == 1

    def test_list_unknown_status(self, svc: TechniqueService) -> None:
        assert svc.list_techniques(status="paused").error.code == VALIDATION_FAILED

    def test_get_splits_day_offs(self, svc: TechniqueService, crane: str) -> None:
        svc.add_day_off(crane, "2024-01-05")
        svc.add_day_off(crane, "2024-02-01")
        data = svc.get(crane).data
        assert data["active_day_offs"] == ["2024-01-05"]
        assert data["inert_day_offs"] == ["2024-02-01"]

    def test_get_missing(self, svc: TechniqueService) -> None:
        result = svc.get("TECH-9999")
        assert result.error.code == NOT_FOUND
        assert result.op == "get_technique"

    def test_calendar(self, svc: TechniqueService, crane: str) -> None:
        svc.toggle_day_off(crane, "2024-01-05")
        data = svc.calendar(crane, month="2024-01").data
        assert data["working_days"] == 9
        assert data["day_offs"] == 1
        assert len(data["days"]) == 31

    def test_calendar_defaults_to_current_month(self, svc: TechniqueService, crane: str) -> None:
        assert svc.calendar(crane).data["month"] == "2024-01"

    def test_calendar_bad_month(self, svc: TechniqueService, crane: str) -> None:
        assert svc.calendar(crane, month="January").error.code == VALIDATION_FAILED


class TestUpdate:
    def test_field_change(self, svc: TechniqueService, crane: str) -> None:
        result = svc.update(crane, changes={"monthly_rent": "26000"})
        assert result.ok
        assert result.data["fields_changed"] == ["monthly_rent"]
        assert result.data["daily_rate"] == "1000.00"
        assert result.data["version"] == 2

    def test_end_and_reopen(self, svc: TechniqueService, crane: str) -> None:
        ended = svc.update(crane, changes={"end_date": "2024-01-05"})
        assert ended.data["status"] == "ended"
        assert ended.data["transition"] == ["active", "ended"]
        reopened = svc.update(crane, changes={"end_date": None})
        assert reopened.data["status"] == "active"
        assert reopened.data["transition"] == ["ended", "active"]

    def test_invalid_range_changes_nothing(self, svc: TechniqueService, crane: str) -> None:
        result = svc.update(crane, changes={"name": "Renamed", "end_date": "2023-12-01"})
        assert result.error.code == INVALID_DATE_RANGE
        stored = svc.get(crane).data
        assert stored["name"] == "Crane"
        assert stored["version"] == 1

    def test_no_changes(self, svc: TechniqueService, crane: str) -> None:
        assert svc.update(crane, changes={}).error.code == VALIDATION_FAILED

    def test_immutable_field_warns(self, svc: TechniqueService, crane: str) -> None:
        result = svc.update(crane, changes={"id": "TECH-0100"})
        assert result.ok
        assert result.data["id"] == crane
        assert result.warnings

    def test_stale_version_rejected(self, svc: TechniqueService, crane: str) -> None:
        svc.update(crane, changes={"name": "First"})
        result = svc.update(crane, changes={"name": "Second"}, expected_version=1)
        assert result.error.code == STALE_WRITE
        assert result.error.detail["actual_version"] == 2
        assert svc.get(crane).data["name"] == "First"

    def test_matching_version_accepted(self, svc: TechniqueService, crane: str) -> None:
        result = svc.update(crane, changes={"name": "Second"}, expected_version=1)
        assert result.ok
        assert result.data["version"] == 2

    def test_missing(self, svc: TechniqueService) -> None:
        assert svc.update("TECH-9999", changes={"name": "x"}).error.code == NOT_FOUND


class TestEnd:
    def test_end_defaults_to_today(self, svc: TechniqueService, crane: str) -> None:
        result = svc.end(crane)
        assert result.data["end_date"] == "2024-01-10"

    def test_end_freezes_accrual(
        self, svc: TechniqueService, crane: str, clock: FixedClock
    ) -> None:
        svc.end(crane, end_date="2024-01-05")
        clock.set_day(date(2024, 3, 1))
        data = svc.get(crane).data
        assert data["total_elapsed_days"] == 5

    def test_end_before_start(self, svc: TechniqueService, crane: str) -> None:
        result = svc.end(crane, end_date="2023-12-31")
        assert result.error.code == INVALID_DATE_RANGE
        assert result.error.detail["start_date"] == "2024-01-01"

    def test_end_bad_day(self, svc: TechniqueService, crane: str) -> None:
        result = svc.end(crane, end_date="soon")
        assert "end_date" in result.error.detail["fields"]


class TestDayOffs:
    def test_toggle_changes_accrual(self, svc: TechniqueService, crane: str) -> None:
        svc.toggle_day_off(crane, "2024-01-05")
        result = svc.toggle_day_off(crane, "2024-01-06")
        assert result.data["marked"] is True
        assert result.data["net_working_days"] == 8
        assert result.data["total_accrued_rent"] == "4615.38"
        back = svc.toggle_day_off(crane, "2024-01-06")
        assert back.data["marked"] is False
        assert back.data["net_working_days"] == 9

    def test_outside_window_warns_but_keeps(self, svc: TechniqueService, crane: str) -> None:
        result = svc.add_day_off(crane, "2024-02-01")
        assert result.ok
        assert result.data["day_offs"] == ["2024-02-01"]
        assert "outside the rental window" in result.warnings[0]
        assert result.data["net_working_days"] == 10

    def test_remove_unmarked_is_noop(self, svc: TechniqueService, crane: str) -> None:
        result = svc.remove_day_off(crane, "2024-01-05")
        assert result.ok
        assert result.data["version"] == 1

    def test_day_offs_survive_ending(self, svc: TechniqueService, crane: str) -> None:
        svc.add_day_off(crane, "2024-01-08")
        svc.end(crane, end_date="2024-01-05")
        data = svc.get(crane).data
        assert data["day_offs"] == ["2024-01-08"]
        assert data["inert_day_offs"] == ["2024-01-08"]

    def test_bad_day(self, svc: TechniqueService, crane: str) -> None:
        result = svc.toggle_day_off(crane, "2024-13-01")
        assert result.error.code == VALIDATION_FAILED
        assert result.op == "toggle_day_off"

    def test_stale_day_off(self, svc: TechniqueService, crane: str) -> None:
        svc.add_day_off(crane, "2024-01-05")
        result = svc.add_day_off(crane, "2024-01-06", expected_version=1)
        assert result.error.code == STALE_WRITE


class TestDelete:
    def test_delete(self, svc: TechniqueService, crane: str) -> None:
        assert svc.delete(crane).data == {"id": crane, "deleted": True}
        assert svc.get(crane).error.code == NOT_FOUND

    def test_delete_missing(self, svc: TechniqueService) -> None:
        assert svc.delete("TECH-9999").error.code == NOT_FOUND
