"""Listing snapshots captured when a booking is started.

Field aliases match the backend's JSON names so listing payloads can be
validated directly with ``Habitation.model_validate(payload)``.
"""

from pydantic import BaseModel, ConfigDict, Field


class HabitationOwner(BaseModel):
    """Owner of a listing; the payee of a booking."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Owner user ID")
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    phone_number: str | None = Field(default=None, alias="phoneNumber")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Habitation(BaseModel):
    """A rentable property or room listing."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Habitation ID")
    name: str = Field(..., description="Listing title")
    description: str = Field(default="")
    type: str = Field(default="", description="Room type, e.g. 'SingleRoom'")
    price: int = Field(..., ge=0, description="Price of a stay in LKR")
    is_reserved: bool = Field(default=False, alias="isReserved")
    owner: HabitationOwner | None = Field(
        default=None, alias="user", description="Listing owner (populated)"
    )
    picture_urls: list[str] = Field(default_factory=list, alias="pictureUrls")

    @property
    def main_picture_url(self) -> str | None:
        return self.picture_urls[0] if self.picture_urls else None


class LocationSnapshot(BaseModel):
    """Address of a habitation at the time the draft was started."""

    model_config = ConfigDict(populate_by_name=True)

    address_no: str = Field(default="", alias="addressNo")
    address_line1: str = Field(default="", alias="addressLine01")
    address_line2: str = Field(default="", alias="addressLine02")
    city: str = Field(default="")
    district: str = Field(default="")
    short_address: str | None = Field(default=None, alias="shortAddress")
    latitude: float | None = None
    longitude: float | None = None

    @property
    def display_address(self) -> str:
        """Short address if the backend supplied one, else a composed one."""
        if self.short_address:
            return self.short_address
        return f"{self.address_no}, {self.city}, {self.district}"


class FeatureSnapshot(BaseModel):
    """Amenities of a habitation at the time the draft was started."""

    model_config = ConfigDict(populate_by_name=True)

    sqft: int = Field(default=0, ge=0)
    family_type: str = Field(default="", alias="familyType")
    windows_count: int = Field(default=0, ge=0, alias="windowsCount")
    small_bed_count: int = Field(default=0, ge=0, alias="smallBedCount")
    large_bed_count: int = Field(default=0, ge=0, alias="largeBedCount")
    chair_count: int = Field(default=0, ge=0, alias="chairCount")
    table_count: int = Field(default=0, ge=0, alias="tableCount")
    is_electricity_available: bool = Field(default=False, alias="isElectricityAvailable")
    is_washing_machine_available: bool = Field(
        default=False, alias="isWachineMachineAvailable"
    )
    is_water_available: bool = Field(default=False, alias="isWaterAvailable")

    @property
    def total_beds(self) -> int:
        return self.small_bed_count + self.large_bed_count
