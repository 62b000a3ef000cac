"""Tests for the selection model."""

from datetime import date, datetime

import pytest

from src.calendar_view.config import CalendarConfig
from src.calendar_view.date_range import compute_range
from src.calendar_view.exceptions import SelectionError
from src.calendar_view.models import CalendarMode, Event, TimeSelected
from src.calendar_view.selection import SelectionModel, detail_lines, resolve_cell
from src.calendar_view.view_builder import build


def _view(mode, events=(), reference=date(2024, 3, 15), **options):
    config = CalendarConfig(mode=mode, **options)
    view_range = compute_range(
        reference, mode, config.week_start_offset, (config.start_hour, config.end_hour)
    )
    return build(list(events), view_range, mode, config), config


class TestResolveCell:
    """Answers for month days and day/week slots."""

    def test_month_cell_carries_day_events(self, make_event):
        event = make_event("09:00", "10:00")
        view, config = _view(CalendarMode.MONTH, [event])

        answer = resolve_cell(date(2024, 3, 15), view, config)

        assert answer.selected_time == datetime(2024, 3, 15)
        assert answer.events == [event]
        assert not answer.disabled

    def test_month_cell_outside_grid(self):
        view, config = _view(CalendarMode.MONTH)
        assert resolve_cell(date(2024, 5, 1), view, config) is None

    def test_week_slot_snaps_to_slot_start(self, make_event):
        event = make_event("09:00", "10:00")
        view, config = _view(CalendarMode.WEEK, [event], step=30)

        answer = resolve_cell(datetime(2024, 3, 15, 9, 20), view, config)

        assert answer.selected_time == datetime(2024, 3, 15, 9)
        assert answer.events == [event]

    def test_day_slot_outside_hours(self):
        view, config = _view(CalendarMode.DAY, start_hour=8, end_hour=18)
        assert resolve_cell(datetime(2024, 3, 15, 19), view, config) is None
        assert resolve_cell(datetime(2024, 3, 15, 7), view, config) is None

    def test_day_view_other_day(self):
        view, config = _view(CalendarMode.DAY)
        assert resolve_cell(datetime(2024, 3, 16, 9), view, config) is None

    def test_bare_date_in_day_view_selects_first_slot(self):
        view, config = _view(CalendarMode.DAY, start_hour=8, end_hour=18)
        answer = resolve_cell(date(2024, 3, 15), view, config)
        assert answer.selected_time == datetime(2024, 3, 15, 8)

    def test_disabled_slot(self):
        view, config = _view(CalendarMode.DAY, mark_disabled=lambda day: True)
        assert resolve_cell(datetime(2024, 3, 15, 9), view, config).disabled


class TestSelectionModel:
    """Explicit selection and auto-selection."""

    def test_select_stores_answer(self):
        view, config = _view(CalendarMode.MONTH)
        model = SelectionModel(auto_select=False)

        answer = model.select(date(2024, 3, 20), view, config)

        assert model.current is answer
        assert model.selected_date == date(2024, 3, 20)

    def test_disabled_cell_rejected_without_auto_select(self):
        view, config = _view(CalendarMode.MONTH, mark_disabled=lambda day: day.day == 20)
        model = SelectionModel(auto_select=False)
        model.select(date(2024, 3, 19), view, config)

        with pytest.raises(SelectionError) as excinfo:
            model.select(date(2024, 3, 20), view, config)

        assert excinfo.value.disabled
        assert model.selected_date == date(2024, 3, 19)

    def test_out_of_view_cell_rejected_without_auto_select(self):
        view, config = _view(CalendarMode.MONTH)
        model = SelectionModel(auto_select=False)

        with pytest.raises(SelectionError) as excinfo:
            model.select(date(2025, 1, 1), view, config)

        assert not excinfo.value.disabled
        assert model.current is None

    def test_disabled_cell_is_noop_with_auto_select(self):
        view, config = _view(CalendarMode.MONTH, mark_disabled=lambda day: day.day == 20)
        model = SelectionModel(auto_select=True)
        model.select(date(2024, 3, 19), view, config)

        answer = model.select(date(2024, 3, 20), view, config)

        assert answer.disabled
        assert model.selected_date == date(2024, 3, 19)

    def test_auto_select_prefers_reference_day(self):
        view, _ = _view(CalendarMode.MONTH)
        model = SelectionModel()

        model.auto_select_month(view, date(2024, 3, 15))

        assert model.selected_date == date(2024, 3, 15)

    def test_auto_select_skips_disabled_first_day(self):
        view, _ = _view(
            CalendarMode.MONTH,
            reference=date(2024, 4, 1),
            mark_disabled=lambda day: day == date(2024, 4, 1),
        )
        model = SelectionModel()

        model.auto_select_month(view, date(2024, 4, 1))

        assert model.selected_date == date(2024, 4, 2)

    def test_auto_select_never_picks_adjacent_month(self):
        view, _ = _view(
            CalendarMode.MONTH,
            reference=date(2024, 4, 1),
            mark_disabled=lambda day: day.month == 4 and day.day < 10,
        )
        model = SelectionModel()

        model.auto_select_month(view, date(2024, 4, 1))

        assert model.selected_date == date(2024, 4, 10)

    def test_auto_select_with_everything_disabled_clears(self):
        view, _ = _view(CalendarMode.MONTH, mark_disabled=lambda day: True)
        model = SelectionModel()
        model.current = None

        assert model.auto_select_month(view, date(2024, 3, 15)) is None
        assert model.current is None

    def test_refresh_picks_up_new_events(self, make_event):
        empty_view, config = _view(CalendarMode.MONTH)
        model = SelectionModel()
        model.select(date(2024, 3, 15), empty_view, config)
        event = make_event("09:00", "10:00")
        busy_view, _ = _view(CalendarMode.MONTH, [event])

        model.refresh(busy_view, config)

        assert model.current.events == [event]


class TestDetailLines:
    """Detail panel text for the selected cell."""

    def test_lists_events_with_times(self, make_event):
        selection = TimeSelected(
            selected_time=datetime(2024, 3, 15),
            events=[
                Event(
                    title="holiday",
                    start_time=datetime(2024, 3, 15),
                    end_time=datetime(2024, 3, 16),
                    all_day=True,
                ),
                make_event("09:00", "09:30", title="standup"),
            ],
        )

        assert detail_lines(selection, CalendarConfig()) == [
            "all day holiday",
            "09:00 - 09:30 standup",
        ]

    def test_empty_cell_uses_no_events_label(self):
        selection = TimeSelected(selected_time=datetime(2024, 3, 15))
        config = CalendarConfig(no_events_label="Nothing planned")
        assert detail_lines(selection, config) == ["Nothing planned"]

    def test_hidden_panel(self):
        selection = TimeSelected(selected_time=datetime(2024, 3, 15))
        assert detail_lines(selection, CalendarConfig(show_event_detail=False)) == []
        assert detail_lines(None, CalendarConfig()) == []
