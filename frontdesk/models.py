# frontdesk/models.py
from frontdesk import db

DEFAULT_PROFILE_IMAGE = 'https://cdn-icons-png.flaticon.com/512/149/149071.png'


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(100), nullable=False)  # bcrypt hash, see passwords.hash_password
    profile_image = db.Column(db.String(500), nullable=False, default=DEFAULT_PROFILE_IMAGE)
    reset_otp_hash = db.Column(db.String(64), nullable=True)
    reset_otp_expires = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    def __repr__(self):
        return f'<User {self.username}>'


class Room(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.String(10), unique=True, nullable=False)
    type = db.Column(db.String(50), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    # Advisory only; occupancy is always computed from bookings.
    status = db.Column(db.Enum('available', 'occupied', name='room_status'), default='available')

    def __repr__(self):
        return f'<Room {self.number}>'


class Guest(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(30), nullable=False)
    id_proof_url = db.Column(db.Text, nullable=False)


class Booking(db.Model):
    __table_args__ = (
        db.CheckConstraint('check_in < check_out', name='ck_booking_window'),
        db.Index('ix_booking_room_window', 'room_id', 'check_in', 'check_out'),
    )

    id = db.Column(db.Integer, primary_key=True)
    guest_id = db.Column(db.Integer, db.ForeignKey('guest.id'), nullable=False, unique=True)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False)
    check_in = db.Column(db.DateTime, nullable=False)
    check_out = db.Column(db.DateTime, nullable=False)

    guest = db.relationship('Guest', backref=db.backref('booking', uselist=False))
    room = db.relationship('Room', backref=db.backref('bookings', lazy=True))

    def __repr__(self):
        return f'<Booking {self.id} room={self.room_id} {self.check_in:%Y-%m-%d %H:%M}>'
