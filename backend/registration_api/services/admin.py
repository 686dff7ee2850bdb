import hmac
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from pydantic.alias_generators import to_camel
from sqlalchemy import delete, false, func, or_, select
from sqlalchemy.orm import Session

from registration_api.core.errors import NotFoundError, PaymentStatusError, UnauthorizedError
from registration_api.core.logging import get_logger
from registration_api.core.settings import Settings
from registration_api.models.player import (
    SEARCHABLE_COLUMNS,
    Category,
    Player,
    PlayingStyle,
    RegistrationState,
)
from registration_api.schemas.player import PlayerUpdateIn
from registration_api.services.payloads import parse_payload

logger = get_logger(__name__)

_SORTABLE = (
    Player.created_at,
    Player.updated_at,
    Player.name,
    Player.age,
    Player.dob,
    Player.category,
    Player.mobile,
    Player.email,
    Player.payment_status,
    Player.playing_style,
)
# Accept both the wire names (createdAt) and the column names (created_at).
SORT_COLUMNS = {c.key: c for c in _SORTABLE} | {to_camel(c.key): c for c in _SORTABLE}


# Largest OFFSET bound to the driver; deeper pages are empty anyway.
MAX_OFFSET = 2**31 - 1
AGE_RANGE = (0, 150)


def _to_int(value, lo: int | None = None, hi: int | None = None) -> int | None:
    """Parse an int; None when malformed or outside [lo, hi]."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        n = value
    else:
        try:
            n = int(str(value).strip())
        except ValueError:
            return None
    if (lo is not None and n < lo) or (hi is not None and n > hi):
        return None
    return n


def _to_bool(value) -> bool | None:
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    return None


@dataclass
class PlayerListQuery:
    limit: int
    page: int = 1
    search: str | None = None
    category: str | None = None
    payment_status: bool | None = None
    age_min: int | None = None
    age_max: int | None = None
    style: str | None = None
    state: str | None = None
    sort_field: str = "created_at"
    sort_desc: bool = True

    @classmethod
    def from_params(
        cls,
        settings: Settings,
        *,
        page=None,
        limit=None,
        sort: str | None = None,
        search: str | None = None,
        category: str | None = None,
        payment_status=None,
        age_min=None,
        age_max=None,
        style: str | None = None,
        state: str | None = None,
    ) -> "PlayerListQuery":
        """Build a query from raw request values; malformed values fall back to defaults."""
        limit_n = _to_int(limit, lo=1)
        if limit_n is None:
            limit_n = settings.DEFAULT_PAGE_SIZE
        limit_n = min(limit_n, settings.MAX_PAGE_SIZE)

        page_n = _to_int(page, lo=1)
        if page_n is None:
            page_n = 1
        page_n = min(page_n, MAX_OFFSET // limit_n + 1)

        q = cls(
            page=page_n,
            limit=limit_n,
            search=(search or "").strip() or None,
            category=category or None,
            payment_status=_to_bool(payment_status),
            age_min=_to_int(age_min, *AGE_RANGE),
            age_max=_to_int(age_max, *AGE_RANGE),
            style=style or None,
            state=state or None,
        )

        if sort:
            name, _, direction = sort.partition(":")
            column = SORT_COLUMNS.get(name.strip())
            if column is not None:
                q.sort_field = column.key
                q.sort_desc = direction.strip().lower() == "desc"
        return q

    @property
    def offset(self) -> int:
        return min((self.page - 1) * self.limit, MAX_OFFSET)


@dataclass
class PaymentStats:
    paid: int = 0
    unpaid: int = 0

    @property
    def total(self) -> int:
        return self.paid + self.unpaid


@dataclass
class PlayerPage:
    results: list[Player]
    total: int
    page: int
    limit: int
    stats: PaymentStats = field(default_factory=PaymentStats)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class AdminQueryService:
    """Token-gated list/search/moderation over registrations."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self._authorized = False

    def authorize(self, token: str | None) -> "AdminQueryService":
        expected = self.settings.ADMIN_TOKEN
        if not expected or not token or not hmac.compare_digest(token.encode(), expected.encode()):
            logger.warning("rejected admin token")
            raise UnauthorizedError()
        self._authorized = True
        return self

    def _require_admin(self) -> None:
        if not self._authorized:
            raise UnauthorizedError()

    def _conditions(self, query: PlayerListQuery) -> list:
        conds = []

        if query.search:
            conds.append(
                or_(
                    *[
                        col.ilike(f"%{_escape_like(term)}%", escape="\\")
                        for term in query.search.split()
                        for col in SEARCHABLE_COLUMNS
                    ]
                )
            )

        if query.category:
            try:
                conds.append(Player.category == Category(query.category))
            except ValueError:
                conds.append(false())

        if query.payment_status is not None:
            conds.append(Player.payment_status.is_(query.payment_status))

        if query.style:
            try:
                conds.append(Player.playing_style == PlayingStyle(query.style))
            except ValueError:
                conds.append(false())

        if query.state:
            try:
                conds.append(Player.registration_state == RegistrationState(query.state).value)
            except ValueError:
                conds.append(false())

        if query.age_min is not None:
            conds.append(Player.age >= query.age_min)
        if query.age_max is not None:
            conds.append(Player.age <= query.age_max)

        return conds

    def payment_stats(self) -> PaymentStats:
        """Paid/unpaid counts over the whole collection, ignoring any list filters."""
        self._require_admin()
        rows = self.db.execute(
            select(Player.payment_status, func.count(Player.id)).group_by(Player.payment_status)
        ).all()
        stats = PaymentStats()
        for status, count in rows:
            if status:
                stats.paid += count
            else:
                stats.unpaid += count
        return stats

    def list(self, query: PlayerListQuery) -> PlayerPage:
        self._require_admin()
        conds = self._conditions(query)

        column = SORT_COLUMNS[query.sort_field]
        order = column.desc() if query.sort_desc else column.asc()
        tiebreak = Player.id.desc() if query.sort_desc else Player.id.asc()

        results = self.db.execute(
            select(Player)
            .where(*conds)
            .order_by(order, tiebreak)
            .offset(query.offset)
            .limit(query.limit)
        ).scalars().all()

        total = self.db.execute(select(func.count(Player.id)).where(*conds)).scalar_one()

        return PlayerPage(
            results=list(results),
            total=total,
            page=query.page,
            limit=query.limit,
            stats=self.payment_stats(),
        )

    def get(self, player_id: str) -> Player:
        self._require_admin()
        player = self.db.get(Player, player_id)
        if not player:
            raise NotFoundError()
        return player

    def update(self, player_id: str, fields: PlayerUpdateIn | dict) -> Player:
        self._require_admin()
        payload = parse_payload(PlayerUpdateIn, fields)
        player = self.get(player_id)

        updates = payload.model_dump(exclude_unset=True)
        if player.payment_status and updates.get("payment_status") is False:
            raise PaymentStatusError()

        for key, value in updates.items():
            setattr(player, key, value)

        self.db.commit()
        self.db.refresh(player)
        logger.info("registration updated id=%s fields=%s", player.id, ",".join(sorted(updates)))
        return player

    def delete(self, player_id: str) -> None:
        player = self.get(player_id)
        self.db.delete(player)
        self.db.commit()
        logger.info("registration deleted id=%s", player_id)

    def purge_stale_drafts(self, older_than: timedelta, now: datetime | None = None) -> int:
        """Delete drafts that never reached the payment step."""
        self._require_admin()
        cutoff = (now or datetime.now(timezone.utc)) - older_than
        result = self.db.execute(
            delete(Player)
            .where(
                Player.registration_state == RegistrationState.DRAFT.value,
                Player.created_at < cutoff,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        logger.info("purged %s stale drafts older than %s", result.rowcount, cutoff.isoformat())
        return result.rowcount
