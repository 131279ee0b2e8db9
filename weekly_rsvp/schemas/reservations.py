from pydantic import BaseModel, Field


class ReservationRequest(BaseModel):
    mobile_no: str = Field(min_length=1, max_length=32)
    email: str = Field(min_length=1, max_length=254)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    # Parsed by the reservation engine so malformed dates surface as business errors.
    birthday: str
    full_address: str = Field(min_length=1, max_length=500)
    city: str = Field(min_length=1, max_length=100)
    vaccinated: bool
    volunteer: bool


class ReservationOut(BaseModel):
    id: str
    person_id: str
    event_id: str
    volunteer: bool
    reservation_date_time: int
    scanned_date_time: int | None

    class Config:
        from_attributes = True
