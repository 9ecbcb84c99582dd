"""Request and response bodies of the JSON API."""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints


class RequestBody(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )


RequiredStr = Annotated[str, StringConstraints(min_length=1)]


# Auth

class RegisterRequest(RequestBody):
    username: RequiredStr
    email: RequiredStr
    password: RequiredStr
    key: RequiredStr


class LoginRequest(RequestBody):
    email: RequiredStr
    password: RequiredStr


class ForgotPasswordRequest(RequestBody):
    email: RequiredStr


class ResetPasswordRequest(RequestBody):
    email: RequiredStr
    otp: RequiredStr
    new_password: str = Field(..., alias='newPassword', min_length=1)


# Bookings

class BookingCreateRequest(RequestBody):
    guest_name: str = Field(..., alias='guestName', min_length=1)
    phone: RequiredStr
    id_proof: str = Field(..., alias='idProof', min_length=1)
    room_number: str = Field(..., alias='roomNumber', min_length=1)
    check_in_date: str = Field(..., alias='checkInDate', min_length=1)
    check_out_date: str = Field(..., alias='checkOutDate', min_length=1)


class ExtendStayRequest(RequestBody):
    new_check_out_date: str = Field(..., alias='newCheckOutDate', min_length=1)


class GuestCreateRequest(RequestBody):
    name: RequiredStr
    phone: RequiredStr
    id_proof: str = Field(..., alias='idProof', min_length=1)


# Rooms

RoomStatus = Literal['available', 'occupied']


class RoomCreateRequest(RequestBody):
    number: RequiredStr
    type: RequiredStr
    price: float = Field(..., ge=0)
    status: RoomStatus = 'available'


class RoomUpdateRequest(RequestBody):
    number: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    status: Optional[RoomStatus] = None


# Responses

class ResponseBody(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    def dump(self):
        return self.model_dump(mode='json', by_alias=True)


class UserOut(ResponseBody):
    id: int
    username: str
    email: str
    profile_image: str = Field(serialization_alias='profileImage')


class RoomOut(ResponseBody):
    id: int
    number: str
    type: str
    price: float
    status: Optional[str] = None


class GuestOut(ResponseBody):
    id: int
    name: str
    phone: str
    id_proof_url: str = Field(serialization_alias='idProofUrl')


class BookingOut(ResponseBody):
    id: int
    guest: GuestOut
    room: RoomOut
    check_in: datetime = Field(serialization_alias='checkIn')
    check_out: datetime = Field(serialization_alias='checkOut')


class RoomStats(ResponseBody):
    total: int
    occupied: int
    available: int


def dump_many(schema, items) -> List[dict]:
    return [schema.model_validate(item).dump() for item in items]
