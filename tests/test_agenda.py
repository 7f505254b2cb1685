"""Tests for the calendar views."""

from datetime import date

from salon_api.agenda import day_schedule, month_overview
from salon_api.catalog import get_professional
from salon_api.scheduler import change_status, confirm_booking
from tests.conftest import MONDAY, SUNDAY


class TestMonthOverview:
    """Per-day counts for a month."""

    def test_one_entry_per_day(self, open_week):
        days = month_overview(open_week, 2026, 10, today=MONDAY)

        assert len(days) == 31
        assert days[0]["date"] == date(2026, 10, 1)
        assert [d["date"] for d in days if d["is_today"]] == [MONDAY]

    def test_counts_open_slots_and_appointments(self, open_week, slot_at, make_request):
        confirm_booking(open_week, slot_at(), get_professional(open_week, "1"), make_request())

        days = {d["date"]: d for d in month_overview(open_week, 2026, 10, today=MONDAY)}

        assert days[MONDAY]["appointments"] == 1
        assert days[MONDAY]["available_slots"] == 26
        assert days[date(2026, 10, 20)]["available_slots"] == 27
        assert days[SUNDAY]["available_slots"] == 0
        assert days[date(2026, 10, 1)]["available_slots"] == 0

    def test_slots_outside_the_month_are_ignored(self, open_week):
        days = month_overview(open_week, 2026, 11, today=MONDAY)

        assert len(days) == 30
        assert sum(d["available_slots"] for d in days) == 0


class TestDaySchedule:
    """Who is free and who is booked on a day."""

    def test_lists_every_professional(self, open_week):
        schedule = day_schedule(open_week, MONDAY)

        assert [e["professional"].name for e in schedule] == ["Ana Silva", "Carlos Santos", "Maria Oliveira"]
        assert all(len(e["available_slots"]) == 9 for e in schedule)
        assert all(e["appointments"] == [] for e in schedule)

    def test_booked_slot_moves_to_appointments(self, open_week, slot_at, make_request):
        booked = confirm_booking(open_week, slot_at(), get_professional(open_week, "1"), make_request())

        ana = day_schedule(open_week, MONDAY)[0]

        assert len(ana["available_slots"]) == 8
        assert [a.appointment_id for a in ana["appointments"]] == [booked.appointment_id]

    def test_cancelled_appointments_are_left_out(self, open_week, slot_at, make_request):
        booked = confirm_booking(open_week, slot_at(), get_professional(open_week, "1"), make_request())
        change_status(open_week, booked.appointment_id, "cancelled")

        ana = day_schedule(open_week, MONDAY)[0]

        assert len(ana["available_slots"]) == 9
        assert ana["appointments"] == []

    def test_closed_day_has_no_slots(self, open_week):
        assert all(e["available_slots"] == [] for e in day_schedule(open_week, SUNDAY))
