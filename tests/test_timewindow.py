from datetime import date, datetime

import pytest

from frontdesk.errors import ValidationError
from frontdesk.timewindow import (
    CHECK_IN,
    CHECK_OUT,
    normalize,
    normalize_check_in,
    normalize_check_out,
    occupied_window,
    stats_window,
    to_calendar_date,
)


class TestNormalize:

    @pytest.mark.parametrize('value', [
        '2024-06-01',
        '2024-06-01T00:00:00',
        '2024-06-01T23:59:59.999Z',
        '2024-06-01T17:45:12.345',
        datetime(2024, 6, 1, 6, 30, 15, 123456),
        date(2024, 6, 1),
    ])
    def test_check_in_is_nine_o_clock(self, value):
        assert normalize_check_in(value) == datetime(2024, 6, 1, 9, 0, 0, 0)

    @pytest.mark.parametrize('value', [
        '2024-06-03',
        '2024-06-03T21:10:00Z',
        datetime(2024, 6, 3, 23, 59, 59, 999999),
    ])
    def test_check_out_is_eight_o_clock(self, value):
        assert normalize_check_out(value) == datetime(2024, 6, 3, 8, 0, 0, 0)

    def test_role_names(self):
        assert normalize('2024-06-01', CHECK_IN).hour == 9
        assert normalize('2024-06-01', CHECK_OUT).hour == 8

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            normalize('2024-06-01', 'late-checkout')

    def test_same_day_turnaround_does_not_overlap(self):
        assert normalize_check_out('2024-06-03') < normalize_check_in('2024-06-03')


class TestCalendarDate:

    @pytest.mark.parametrize('value', ['', '   ', 'tomorrow', '2024-13-40', None, 20240601])
    def test_rejects_malformed_input(self, value):
        with pytest.raises(ValidationError):
            to_calendar_date(value)

    def test_drops_time_of_day(self):
        assert to_calendar_date('2024-06-01T18:00:00Z') == date(2024, 6, 1)


class TestWindows:

    def test_occupied_window_runs_from_eight_to_end_of_day(self):
        start, end = occupied_window('2024-06-02')
        assert start == datetime(2024, 6, 2, 8, 0)
        assert end == datetime(2024, 6, 2, 23, 59, 59, 999000)

    def test_stats_window_covers_one_hotel_night(self):
        start, end = stats_window(date(2024, 6, 30))
        assert start == datetime(2024, 6, 30, 9, 0)
        assert end == datetime(2024, 7, 1, 8, 0)
