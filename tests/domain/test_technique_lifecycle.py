"""Tests for technique creation, ending, reopening and field updates."""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from rentledger.domain.errors import InvalidDateRangeError
from rentledger.domain.lifecycle import (
    TECHNIQUE_TRANSITIONS,
    apply_update,
    end_technique,
    is_valid_transition,
    new_technique,
)
from rentledger.domain.models import Active, Ended, rental_state
from rentledger.domain.types import TechniqueStatus

TODAY = date(2024, 1, 10)


class TestNewTechnique:
    def test_starts_active_and_clean(self) -> None:
        t = new_technique(
            technique_id="TECH-0001",
            name="Crane",
            monthly_rent=Decimal("15000"),
            planned_working_days=26,
            start_date=date(2024, 1, 1),
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
        )
        assert t.status is TechniqueStatus.ACTIVE
        assert t.end_date is None
        assert t.day_offs == ()
        assert t.version == 1


class TestRentalState:
    def test_variant_from_end_date(self) -> None:
        assert isinstance(rental_state(None), Active)
        assert rental_state(date(2024, 1, 5)) == Ended(end_date=date(2024, 1, 5))

    def test_transition_map(self) -> None:
        assert is_valid_transition("active", "ended", TECHNIQUE_TRANSITIONS)
        assert is_valid_transition("ended", "active", TECHNIQUE_TRANSITIONS)
        assert not is_valid_transition("ended", "ended", TECHNIQUE_TRANSITIONS)


class TestEnd:
    def test_defaults_to_today(self, make_technique) -> None:
        ended = end_technique(make_technique(), today=TODAY)
        assert ended.status is TechniqueStatus.ENDED
        assert ended.end_date == TODAY

    def test_explicit_end(self, make_technique) -> None:
        ended = end_technique(make_technique(), date(2024, 1, 5), today=TODAY)
        assert ended.end_date == date(2024, 1, 5)

    def test_end_on_start_day_is_allowed(self, make_technique) -> None:
        ended = end_technique(make_technique(), date(2024, 1, 1), today=TODAY)
        assert ended.end_date == date(2024, 1, 1)

    def test_end_before_start_rejected(self, make_technique) -> None:
        with pytest.raises(InvalidDateRangeError):
            end_technique(make_technique(), date(2023, 12, 31), today=TODAY)

    def test_day_offs_untouched(self, make_technique) -> None:
        t = make_technique(day_offs=("2024-01-03", "2024-01-20"))
        assert end_technique(t, date(2024, 1, 5), today=TODAY).day_offs == t.day_offs


class TestApplyUpdate:
    def test_plain_field_change(self, make_technique) -> None:
        outcome = apply_update(make_technique(), {"name": "Loader"}, today=TODAY)
        assert outcome.technique.name == "Loader"
        assert outcome.fields_changed == ["name"]
        assert outcome.transition is None

    def test_unchanged_value_is_not_reported(self, make_technique) -> None:
        outcome = apply_update(make_technique(), {"name": "Excavator"}, today=TODAY)
        assert outcome.fields_changed == []

    def test_setting_end_date_ends(self, make_technique) -> None:
        outcome = apply_update(make_technique(), {"end_date": date(2024, 1, 5)}, today=TODAY)
        assert outcome.technique.status is TechniqueStatus.ENDED
        assert outcome.transition == ("active", "ended")

    def test_clearing_end_date_reopens(self, make_technique) -> None:
        t = make_technique(end=date(2024, 1, 5))
        outcome = apply_update(t, {"end_date": None}, today=TODAY)
        assert outcome.technique.status is TechniqueStatus.ACTIVE
        assert outcome.technique.end_date is None
        assert outcome.transition == ("ended", "active")

    def test_reopen_and_move_start_together(self, make_technique) -> None:
        t = make_technique(end=date(2024, 1, 5))
        outcome = apply_update(
            t, {"end_date": None, "start_date": date(2024, 1, 8)}, today=TODAY
        )
        assert outcome.technique.status is TechniqueStatus.ACTIVE
        assert outcome.technique.start_date == date(2024, 1, 8)
        assert sorted(outcome.fields_changed) == ["end_date", "start_date"]

    def test_reopen_still_rejects_start_after_today(self, make_technique) -> None:
        t = make_technique(end=date(2024, 1, 5))
        with pytest.raises(InvalidDateRangeError):
            apply_update(
                t, {"end_date": None, "start_date": date(2024, 1, 11)}, today=TODAY
            )

    def test_end_before_start_rejects_everything(self, make_technique) -> None:
        with pytest.raises(InvalidDateRangeError):
            apply_update(
                make_technique(),
                {"name": "Loader", "end_date": date(2023, 12, 1)},
                today=TODAY,
            )

    def test_start_moved_past_end_rejected(self, make_technique) -> None:
        t = make_technique(end=date(2024, 1, 5))
        with pytest.raises(InvalidDateRangeError):
            apply_update(t, {"start_date": date(2024, 1, 6)}, today=TODAY)

    def test_start_and_end_together(self, make_technique) -> None:
        t = make_technique(end=date(2024, 1, 5))
        outcome = apply_update(
            t, {"start_date": date(2024, 1, 6), "end_date": date(2024, 1, 9)}, today=TODAY
        )
        assert outcome.technique.start_date == date(2024, 1, 6)
        assert sorted(outcome.fields_changed) == ["end_date", "start_date"]

    def test_immutable_and_unknown_keys_warn(self, make_technique) -> None:
        outcome = apply_update(
            make_technique(), {"id": "TECH-9999", "colour": "red"}, today=TODAY
        )
        assert outcome.technique.id == "TECH-0001"
        assert outcome.fields_changed == []
        assert any("immutable" in w for w in outcome.warnings)
        assert any("colour" in w for w in outcome.warnings)

    def test_contradicting_status_hint_warns(self, make_technique) -> None:
        outcome = apply_update(make_technique(), {"status": "ended"}, today=TODAY)
        assert outcome.technique.status is TechniqueStatus.ACTIVE
        assert outcome.warnings

    def test_day_offs_survive_reopen(self, make_technique) -> None:
        t = make_technique(end=date(2024, 1, 5), day_offs=("2024-01-08",))
        outcome = apply_update(t, {"end_date": None}, today=TODAY)
        assert outcome.technique.day_offs == ("2024-01-08",)
