"""
Booking lifecycle: create a stay, extend it, list them.

Both write paths lock the room row before checking for conflicts and commit
the check and the write in one transaction, so two requests for the same
room cannot both pass the check. SQLite ignores FOR UPDATE, so there the
lock is the database write lock, taken by touching the room row. The guest
record is written in the same transaction as its booking.
"""

import logging

from sqlalchemy import update
from sqlalchemy.orm import joinedload

from frontdesk import db
from frontdesk.availability import find_conflict
from frontdesk.errors import BookingConflictError, InternalError, NotFoundError, ValidationError
from frontdesk.models import Booking, Guest, Room
from frontdesk.storage import StorageError
from frontdesk.timewindow import normalize_check_in, normalize_check_out

logger = logging.getLogger(__name__)


def _lock_room(**criteria):
    room = Room.query.filter_by(**criteria).with_for_update().first()
    if room is not None and db.session.get_bind().dialect.name == 'sqlite':
        # A no-op write holds the database write lock until commit or rollback
        rooms = Room.__table__
        db.session.execute(update(rooms).where(rooms.c.id == room.id).values(id=room.id))
    return room


def store_identity_proof(store, data):
    try:
        return store.upload_image(data)
    except StorageError:
        logger.exception('Identity proof upload failed')
        raise InternalError('Failed to upload identity proof') from None


class BookingService:

    def __init__(self, proof_store):
        self.proof_store = proof_store

    def create(self, request):
        room = _lock_room(number=request.room_number)
        if not room:
            raise NotFoundError('Room not found')

        check_in = normalize_check_in(request.check_in_date)
        check_out = normalize_check_out(request.check_out_date)
        if check_out <= check_in:
            raise ValidationError('Check-out must be after check-in')

        conflict = find_conflict(room, check_in, check_out)
        if conflict:
            logger.info('Room %s already booked (booking %s)', room.number, conflict.id)
            raise BookingConflictError('Room is already booked for those dates')

        guest = Guest(
            name=request.guest_name,
            phone=request.phone,
            id_proof_url=store_identity_proof(self.proof_store, request.id_proof),
        )
        booking = Booking(guest=guest, room=room, check_in=check_in, check_out=check_out)
        db.session.add_all([guest, booking])
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info('Booked room %s for %s (%s -> %s)', room.number, guest.name, check_in, check_out)
        return booking

    def extend(self, booking_id, new_check_out_date):
        booking = db.session.get(Booking, booking_id)
        if not booking:
            raise NotFoundError('Booking not found')

        room = _lock_room(id=booking.room_id)
        # Another extension may have committed while we waited for the lock
        db.session.refresh(booking)

        new_check_out = normalize_check_out(new_check_out_date)
        current_check_out = booking.check_out
        if new_check_out <= current_check_out:
            raise ValidationError('New check-out must be after current check-out')

        if find_conflict(room, current_check_out, new_check_out, exclude=booking.id):
            raise BookingConflictError('Room is already booked during the extended period')

        booking.check_out = new_check_out
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info('Extended booking %s to %s', booking.id, new_check_out)
        return booking

    def list(self):
        return (
            Booking.query
            .options(joinedload(Booking.guest), joinedload(Booking.room))
            .order_by(Booking.check_in)
            .all()
        )
