from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from registration_api.core.errors import NotFoundError, PaymentStatusError, ValidationError
from registration_api.core.logging import get_logger
from registration_api.models.player import Player
from registration_api.schemas.player import PlayerCreateIn, PlayerDetailsIn
from registration_api.services.payloads import parse_payload

logger = get_logger(__name__)

# Columns that may be absent from the details payload but never written as null.
_SKIP_IF_NULL = ("payment_status", "playing_style")


class RegistrationService:
    """Public two-step intake: create a draft, then attach payment details."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, draft: PlayerCreateIn | dict) -> Player:
        payload = parse_payload(PlayerCreateIn, draft)

        player = Player(**payload.model_dump())
        player.payment_status = False
        self.db.add(player)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("Failed to create registration")

        self.db.refresh(player)
        logger.info("registration created id=%s category=%s", player.id, player.category.value)
        return player

    def finalize(self, player_id: str, details: PlayerDetailsIn | dict) -> Player:
        payload = parse_payload(PlayerDetailsIn, details)

        player = self.db.get(Player, player_id)
        if not player:
            raise NotFoundError("Player record not found.")

        updates = payload.model_dump(exclude_unset=True)
        for key in _SKIP_IF_NULL:
            if key in updates and updates[key] is None:
                del updates[key]

        if player.payment_status and updates.get("payment_status") is False:
            raise PaymentStatusError()

        for key, value in updates.items():
            setattr(player, key, value)

        self.db.commit()
        self.db.refresh(player)
        logger.info(
            "registration finalized id=%s payment_status=%s", player.id, player.payment_status
        )
        return player
