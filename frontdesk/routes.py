from decimal import Decimal

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_current_user, jwt_required
from sqlalchemy.exc import IntegrityError

from frontdesk import auth, availability, db, passwords, timewindow
from frontdesk.bookings import BookingService, store_identity_proof
from frontdesk.errors import ConflictError, DuplicateError, NotFoundError, ValidationError
from frontdesk.models import Booking, Guest, Room
from frontdesk.schemas import (
    BookingCreateRequest,
    BookingOut,
    ExtendStayRequest,
    ForgotPasswordRequest,
    GuestCreateRequest,
    GuestOut,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    RoomCreateRequest,
    RoomOut,
    RoomStats,
    RoomUpdateRequest,
    UserOut,
    dump_many,
)

api = Blueprint('api', __name__)


def parse_body(schema):
    return schema.model_validate(request.get_json(silent=True) or {})


def booking_service():
    return BookingService(current_app.extensions['frontdesk.proof_store'])


def requested_day():
    raw = request.args.get('date')
    return timewindow.to_calendar_date(raw) if raw else timewindow.now().date()


def get_room_or_404(room_id):
    room = db.session.get(Room, room_id)
    if not room:
        raise NotFoundError('Room not found')
    return room


def commit_room(number):
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateError(f'Room {number} already exists') from None


### AUTH ###

def auth_response(message, user, token):
    return {'message': message, 'token': token, 'user': UserOut.model_validate(user).dump()}


@api.route('/auth/register', methods=['POST'])
def register():
    user, token = auth.register(parse_body(RegisterRequest))
    return jsonify(auth_response('Registration successful', user, token)), 201


@api.route('/auth/login', methods=['POST'])
def login():
    user, token = auth.login(parse_body(LoginRequest))
    return jsonify(auth_response('Login successful', user, token)), 200


@api.route('/auth/me', methods=['GET'])
@jwt_required()
def me():
    return jsonify(UserOut.model_validate(get_current_user()).dump()), 200


@api.route('/auth/forgot-password', methods=['POST'])
def forgot_password():
    body = parse_body(ForgotPasswordRequest)
    passwords.issue_reset(body.email, current_app.extensions['frontdesk.mailer'])
    return jsonify({'message': 'OTP sent to your email'}), 200


@api.route('/auth/reset-password', methods=['POST'])
def reset_password():
    body = parse_body(ResetPasswordRequest)
    passwords.consume_reset(body.email, body.otp, body.new_password)
    return jsonify({'message': 'Password has been reset successfully'}), 200


### BOOKINGS ###

@api.route('/bookings', methods=['POST'])
@jwt_required()
def create_booking():
    booking = booking_service().create(parse_body(BookingCreateRequest))
    return jsonify({
        'message': 'Booking successful',
        'bookingId': booking.id,
        'guest': GuestOut.model_validate(booking.guest).dump(),
        'room': RoomOut.model_validate(booking.room).dump(),
    }), 201


@api.route('/bookings', methods=['GET'])
@jwt_required()
def get_bookings():
    return jsonify(dump_many(BookingOut, booking_service().list())), 200


@api.route('/bookings/extend/<int:booking_id>', methods=['PUT'])
@jwt_required()
def extend_booking(booking_id):
    body = parse_body(ExtendStayRequest)
    booking = booking_service().extend(booking_id, body.new_check_out_date)
    return jsonify({
        'message': 'Stay extended successfully',
        'updatedBooking': BookingOut.model_validate(booking).dump(),
    }), 200


### GUESTS ###

@api.route('/guests', methods=['GET'])
@jwt_required()
def get_guests():
    return jsonify(dump_many(GuestOut, Guest.query.order_by(Guest.id).all())), 200


@api.route('/guests', methods=['POST'])
@jwt_required()
def create_guest():
    body = parse_body(GuestCreateRequest)
    proof_url = store_identity_proof(current_app.extensions['frontdesk.proof_store'], body.id_proof)
    guest = Guest(name=body.name, phone=body.phone, id_proof_url=proof_url)
    db.session.add(guest)
    db.session.commit()
    return jsonify(GuestOut.model_validate(guest).dump()), 201


### ROOMS ###

@api.route('/rooms/stats', methods=['GET'])
def get_room_stats():
    stats = availability.room_stats(requested_day())
    return jsonify(RoomStats(**stats).dump()), 200


@api.route('/rooms/available', methods=['GET'])
def get_available_rooms():
    check_in = request.args.get('checkIn')
    check_out = request.args.get('checkOut')
    if not check_in or not check_out:
        raise ValidationError('Need both dates')

    start = timewindow.normalize_check_in(check_in)
    end = timewindow.normalize_check_out(check_out)
    if end <= start:
        raise ValidationError('Check-out must be after check-in')
    return jsonify(dump_many(RoomOut, availability.available_rooms(start, end))), 200


@api.route('/rooms/occupied', methods=['GET'])
def get_occupied_rooms():
    return jsonify(dump_many(RoomOut, availability.occupied_rooms(requested_day()))), 200


@api.route('/rooms', methods=['GET'])
def get_rooms():
    return jsonify(dump_many(RoomOut, Room.query.order_by(Room.number).all())), 200


@api.route('/rooms/<int:room_id>', methods=['GET'])
def get_room(room_id):
    return jsonify(RoomOut.model_validate(get_room_or_404(room_id)).dump()), 200


@api.route('/rooms', methods=['POST'])
@jwt_required()
def create_room():
    body = parse_body(RoomCreateRequest)
    room = Room(number=body.number, type=body.type, price=Decimal(str(body.price)), status=body.status)
    db.session.add(room)
    commit_room(room.number)
    return jsonify(RoomOut.model_validate(room).dump()), 201


@api.route('/rooms/<int:room_id>', methods=['PUT'])
@jwt_required()
def update_room(room_id):
    body = parse_body(RoomUpdateRequest)
    room = get_room_or_404(room_id)

    changes = body.model_dump(exclude_none=True)
    if 'price' in changes:
        changes['price'] = Decimal(str(changes['price']))
    for field, value in changes.items():
        setattr(room, field, value)

    commit_room(room.number)
    return jsonify(RoomOut.model_validate(room).dump()), 200


@api.route('/rooms/<int:room_id>', methods=['DELETE'])
@jwt_required()
def delete_room(room_id):
    room = get_room_or_404(room_id)

    upcoming = Booking.query.filter(
        Booking.room_id == room.id,
        Booking.check_out > timewindow.now(),
    ).first()
    if upcoming:
        raise ConflictError('Room has active or upcoming bookings')
    if Booking.query.filter_by(room_id=room.id).first():
        raise ConflictError('Room has past bookings and cannot be deleted')

    db.session.delete(room)
    db.session.commit()
    return jsonify({'message': 'Room deleted'}), 200
