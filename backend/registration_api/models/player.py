import enum
from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Date, DateTime, Enum, Integer, String, Text, case, false, func, or_
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from registration_api.db.base import Base


class Category(str, enum.Enum):
    AGE_20_30 = "20-30"
    AGE_35_PLUS = "35+"
    AGE_40_PLUS = "40+"
    AGE_45_PLUS = "45+"
    AGE_50_PLUS = "50+"
    AGE_55_PLUS = "55+"


class PlayingStyle(str, enum.Enum):
    OFFENSIVE = "OFFENSIVE"
    DEFENSIVE = "DEFENSIVE"
    UNKNOWN = "UNKNOWN"


class RegistrationState(str, enum.Enum):
    DRAFT = "DRAFT"
    FINALIZED = "FINALIZED"


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(cls: type[enum.Enum]) -> list[str]:
    return [m.value for m in cls]


class Player(Base):
    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)

    # Phase 1 (intake).
    name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    mobile: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(320), index=True)
    dob: Mapped[date] = mapped_column(Date, nullable=False)
    # Computed by the intake form from dob; stored as given.
    age: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    adhar: Mapped[str | None] = mapped_column(String(32), index=True)
    category: Mapped[Category] = mapped_column(
        Enum(
            Category,
            name="player_category",
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )
    player_image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    valid_document_url: Mapped[str | None] = mapped_column(String(1024))

    # Phase 2 (payment + details).
    upi_or_barcode: Mapped[str | None] = mapped_column(String(256))
    payment_screenshot_url: Mapped[str | None] = mapped_column(String(1024))
    payment_status: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(), index=True
    )
    achievements: Mapped[str | None] = mapped_column(String(1000))
    playing_style: Mapped[PlayingStyle] = mapped_column(
        Enum(
            PlayingStyle,
            name="player_playing_style",
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=PlayingStyle.UNKNOWN,
        server_default=PlayingStyle.UNKNOWN.value,
    )
    remark: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
        nullable=False,
    )

    @hybrid_property
    def registration_state(self) -> RegistrationState:
        if self.upi_or_barcode or self.payment_screenshot_url:
            return RegistrationState.FINALIZED
        return RegistrationState.DRAFT

    @registration_state.inplace.expression
    @classmethod
    def _registration_state_expression(cls):
        return case(
            (
                or_(cls.upi_or_barcode.isnot(None), cls.payment_screenshot_url.isnot(None)),
                RegistrationState.FINALIZED.value,
            ),
            else_=RegistrationState.DRAFT.value,
        )


# Columns searched by the admin free-text filter.
SEARCHABLE_COLUMNS = (Player.name, Player.email, Player.mobile, Player.adhar)
