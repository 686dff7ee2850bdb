from datetime import date, datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from registration_api.models.player import Category, PlayingStyle, RegistrationState


class CamelModel(BaseModel):
    # Wire format is camelCase (playerImageUrl, paymentStatus, ...); snake_case is accepted too.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def _blank_to_none(v):
    if isinstance(v, str) and not v:
        return None
    return v


class PlayerCreateIn(CamelModel):
    name: str = Field(min_length=1, max_length=128)
    mobile: str = Field(min_length=1, max_length=32)
    email: str | None = Field(default=None, max_length=320)
    dob: date
    age: int = Field(ge=0, le=150)
    adhar: str | None = Field(default=None, max_length=32)
    category: Category
    player_image_url: str = Field(min_length=1, max_length=1024)
    valid_document_url: str | None = Field(default=None, max_length=1024)

    @field_validator("email", "adhar", "valid_document_url")
    @classmethod
    def blank_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v


class PlayerDetailsIn(CamelModel):
    """Second intake step. Fields not listed here are ignored."""

    upi_or_barcode: str | None = Field(default=None, max_length=256)
    payment_screenshot_url: str | None = Field(default=None, max_length=1024)
    payment_status: bool | None = None
    achievements: str | None = Field(default=None, max_length=1000)
    playing_style: PlayingStyle | None = None
    remark: str | None = None

    @field_validator("upi_or_barcode", "payment_screenshot_url", "achievements", "remark")
    @classmethod
    def blank_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


# Columns that exist on every record and cannot be cleared.
_NOT_NULLABLE = (
    "name",
    "mobile",
    "dob",
    "age",
    "category",
    "player_image_url",
    "payment_status",
    "playing_style",
)


class PlayerUpdateIn(CamelModel):
    """Admin edit: any subset of the record fields, nothing else."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=128)
    mobile: str | None = Field(default=None, min_length=1, max_length=32)
    email: str | None = Field(default=None, max_length=320)
    dob: date | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    adhar: str | None = Field(default=None, max_length=32)
    category: Category | None = None
    player_image_url: str | None = Field(default=None, min_length=1, max_length=1024)
    valid_document_url: str | None = Field(default=None, max_length=1024)
    upi_or_barcode: str | None = Field(default=None, max_length=256)
    payment_screenshot_url: str | None = Field(default=None, max_length=1024)
    payment_status: bool | None = None
    achievements: str | None = Field(default=None, max_length=1000)
    playing_style: PlayingStyle | None = None
    remark: str | None = None

    @field_validator(
        "email",
        "adhar",
        "valid_document_url",
        "upi_or_barcode",
        "payment_screenshot_url",
        "achievements",
        "remark",
    )
    @classmethod
    def blank_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v

    @model_validator(mode="after")
    def required_fields_not_cleared(self):
        cleared = [f for f in _NOT_NULLABLE if f in self.model_fields_set and getattr(self, f) is None]
        if cleared:
            raise ValueError(f"{', '.join(to_camel(f) for f in cleared)} cannot be null")
        return self


class PlayerOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    mobile: str
    email: str | None
    dob: date
    age: int
    adhar: str | None
    category: Category
    player_image_url: str
    valid_document_url: str | None
    upi_or_barcode: str | None
    payment_screenshot_url: str | None
    payment_status: bool
    achievements: str | None
    playing_style: PlayingStyle
    remark: str | None
    registration_state: RegistrationState
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="_id")
    @property
    def legacy_id(self) -> str:
        return self.id


class PlayerStatsOut(BaseModel):
    total: int
    paid: int
    unpaid: int


class PlayerListOut(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int
    results: list[PlayerOut]
    stats: PlayerStatsOut


class DeletedOut(BaseModel):
    message: str = "Deleted successfully"


class PurgedOut(BaseModel):
    deleted: int


class UploadOut(BaseModel):
    url: str
