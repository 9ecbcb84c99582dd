"""
Room availability.

Stays are half-open intervals ``[check_in, check_out)``; two stays conflict
when ``a.check_in < b.check_out and a.check_out > b.check_in``. A room's
``status`` column is never consulted here.
"""

from sqlalchemy import and_, distinct, func, select

from frontdesk import db
from frontdesk.models import Booking, Room
from frontdesk.timewindow import occupied_window, stats_window


def overlaps(a_start, a_end, b_start, b_end):
    return a_start < b_end and a_end > b_start


def _overlapping(start, end):
    return and_(Booking.check_in < end, Booking.check_out > start)


def find_conflict(room, start, end, exclude=None):
    """Return the first booking of ``room`` overlapping ``[start, end)``, if any.

    ``exclude`` is a booking id left out of the search (the stay being
    extended).
    """
    query = Booking.query.filter(Booking.room_id == room.id, _overlapping(start, end))
    if exclude is not None:
        query = query.filter(Booking.id != exclude)
    return query.order_by(Booking.check_in).first()


def is_available(room, start, end, exclude=None):
    return find_conflict(room, start, end, exclude=exclude) is None


def _busy_room_ids(start, end):
    return select(Booking.room_id).where(_overlapping(start, end)).distinct()


def available_rooms(start, end):
    busy = _busy_room_ids(start, end)
    return Room.query.filter(~Room.id.in_(busy)).order_by(Room.number).all()


def occupied_rooms(day):
    """Rooms with a guest at any point between 08:00 and midnight on ``day``."""
    start, end = occupied_window(day)
    busy = _busy_room_ids(start, end)
    return Room.query.filter(Room.id.in_(busy)).order_by(Room.number).all()


def room_stats(day):
    """Occupancy counters for the hotel night starting at 09:00 on ``day``."""
    start, end = stats_window(day)
    total = Room.query.count()
    occupied = db.session.scalar(
        select(func.count(distinct(Booking.room_id))).where(_overlapping(start, end))
    )
    return {'total': total, 'occupied': occupied, 'available': total - occupied}
