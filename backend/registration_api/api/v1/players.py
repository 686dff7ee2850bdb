from datetime import timedelta

from fastapi import APIRouter, Depends, Query

from registration_api.api.deps import (
    enforce_submission_rate_limit,
    get_admin_service,
    get_registration_service,
)
from registration_api.core.settings import Settings, get_settings
from registration_api.schemas.player import (
    DeletedOut,
    PlayerCreateIn,
    PlayerDetailsIn,
    PlayerListOut,
    PlayerOut,
    PlayerStatsOut,
    PlayerUpdateIn,
    PurgedOut,
)
from registration_api.services.admin import AdminQueryService, PlayerListQuery
from registration_api.services.registration import RegistrationService

router = APIRouter()


# --- Public intake ---


@router.post(
    "/players",
    response_model=PlayerOut,
    status_code=201,
    dependencies=[Depends(enforce_submission_rate_limit)],
)
def create_player(
    payload: PlayerCreateIn,
    service: RegistrationService = Depends(get_registration_service),
):
    return service.create(payload)


@router.patch("/players/{player_id}/details", response_model=PlayerOut)
def finalize_player(
    player_id: str,
    payload: PlayerDetailsIn,
    service: RegistrationService = Depends(get_registration_service),
):
    return service.finalize(player_id, payload)


# --- Admin (X-Admin-Token) ---


@router.get("/players", response_model=PlayerListOut)
def list_players(
    page: str | None = None,
    limit: str | None = None,
    sort: str | None = None,
    search: str | None = None,
    category: str | None = None,
    payment_status: str | None = Query(default=None, alias="paymentStatus"),
    age_min: str | None = Query(default=None, alias="ageMin"),
    age_max: str | None = Query(default=None, alias="ageMax"),
    style: str | None = None,
    state: str | None = None,
    service: AdminQueryService = Depends(get_admin_service),
    settings: Settings = Depends(get_settings),
):
    # Everything arrives as raw strings; bad values fall back to defaults instead of 400.
    query = PlayerListQuery.from_params(
        settings,
        page=page,
        limit=limit,
        sort=sort,
        search=search,
        category=category,
        payment_status=payment_status,
        age_min=age_min,
        age_max=age_max,
        style=style,
        state=state,
    )
    result = service.list(query)
    return PlayerListOut(
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        results=[PlayerOut.model_validate(p) for p in result.results],
        stats=PlayerStatsOut(
            total=result.stats.total,
            paid=result.stats.paid,
            unpaid=result.stats.unpaid,
        ),
    )


@router.delete("/players/drafts", response_model=PurgedOut)
def purge_stale_drafts(
    older_than_hours: float = Query(default=24, ge=0, alias="olderThanHours"),
    service: AdminQueryService = Depends(get_admin_service),
):
    deleted = service.purge_stale_drafts(timedelta(hours=older_than_hours))
    return PurgedOut(deleted=deleted)


@router.get("/players/{player_id}", response_model=PlayerOut)
def get_player(
    player_id: str,
    service: AdminQueryService = Depends(get_admin_service),
):
    return service.get(player_id)


@router.put("/players/{player_id}", response_model=PlayerOut)
def update_player(
    player_id: str,
    payload: PlayerUpdateIn,
    service: AdminQueryService = Depends(get_admin_service),
):
    return service.update(player_id, payload)


@router.delete("/players/{player_id}", response_model=DeletedOut)
def delete_player(
    player_id: str,
    service: AdminQueryService = Depends(get_admin_service),
):
    service.delete(player_id)
    return DeletedOut()
