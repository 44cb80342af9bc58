from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

# --- Literals ---
FuelType = Literal["diesel", "gasoline"]

MANUAL_ARCHIVE_REASON = "manual_profile_delete"


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Locations ---


class Location(BaseModel):
    city: str = ""
    state: str = ""
    zip: str = ""


# --- Loads ---


class LoadRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    created_by: str = Field(alias="createdBy")
    shipper_id: str | None = Field(default=None, alias="shipperId")
    status: str = "active"
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    pickup_date: datetime | None = Field(default=None, alias="pickupDate")
    delivery_date: datetime | None = Field(default=None, alias="deliveryDate")
    delivery_date_local: str | None = Field(default=None, alias="deliveryDateLocal")
    delivery_tz: str | None = Field(default=None, alias="deliveryTZ")

    rate: float = Field(default=0.0, ge=0)
    rate_total_usd: float | None = Field(default=None, alias="rateTotalUSD")
    rpm: float | None = None
    distance_miles: float | None = Field(default=None, alias="distanceMiles")
    weight_lbs: float | None = Field(default=None, ge=0, alias="weightLbs")
    equipment_type: str | None = Field(default=None, alias="equipmentType")

    origin: Location = Field(default_factory=Location)
    destination: Location = Field(default_factory=Location)

    title: str = ""
    description: str = ""
    contact_name: str = Field(default="", alias="contactName")
    contact_email: str = Field(default="", alias="contactEmail")
    contact_phone: str = Field(default="", alias="contactPhone")

    photos: list[str] = Field(default_factory=list, max_length=20)
    primary_photo: str = Field(default="", alias="primaryPhoto")

    is_archived: bool = Field(default=False, alias="isArchived")
    archived_at: datetime | None = Field(default=None, alias="archivedAt")
    archived_reason: str | None = Field(default=None, alias="archivedReason")
    expires_at_ms: int | None = Field(default=None, alias="expiresAtMs")

    @model_validator(mode="after")
    def _check_invariants(self) -> "LoadRecord":
        if self.is_archived and self.archived_at is None:
            raise ValueError("archived loads must carry archivedAt")
        if self.primary_photo and self.primary_photo not in self.photos:
            raise ValueError("primaryPhoto must be one of photos")
        return self

    def to_document(self) -> dict:
        """Store representation: camelCase keys, unset optionals omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    @classmethod
    def from_document(cls, doc: dict) -> "LoadRecord":
        return cls.model_validate(doc)
