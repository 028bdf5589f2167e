from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
import logging

from fastapi import Depends, FastAPI
from fastapi.responses import RedirectResponse

from magtag_gateway.gateway import collect_documents_async, resolve_display
from magtag_gateway.resolution_log import ResolutionLog, get_resolution_log
from magtag_gateway.schemas import DisplayPayloadOut, ResolutionsResponse
from magtag_gateway.settings import GatewaySettings, get_settings

app = FastAPI(title="MagTag Gateway")
logger = logging.getLogger(__name__)


def get_now() -> datetime:
    return datetime.now(timezone.utc)


@app.on_event("startup")
async def startup() -> None:
    settings = get_settings()
    logger.info(
        "Gateway starting: default_team_id=%s venue_tz=%s events=%s secondary_schedule=%s",
        settings.default_team_id,
        settings.venue_tz_name,
        settings.events_enabled,
        settings.secondary_schedule_enabled,
    )


async def _next_payload(
    team_id: int,
    settings: GatewaySettings,
    now: datetime,
    resolutions: ResolutionLog,
) -> DisplayPayloadOut:
    documents = await collect_documents_async(team_id, settings)
    payload = resolve_display(documents, team_id, settings, now)
    logger.info(
        "team_id=%s top=%r middle=%r bottom=%r sleep=%s",
        team_id,
        payload.top,
        payload.middle,
        payload.bottom,
        payload.sleep_seconds,
    )
    resolutions.record(team_id, payload, now)
    return DisplayPayloadOut(**asdict(payload))


@app.get("/")
def redirect_root() -> RedirectResponse:
    return RedirectResponse(url="/next")


@app.get("/next", response_model=DisplayPayloadOut)
async def get_next_up(
    team: int | None = None,
    settings: GatewaySettings = Depends(get_settings),
    now: datetime = Depends(get_now),
    resolutions: ResolutionLog = Depends(get_resolution_log),
):
    team_id = team if team is not None else settings.default_team_id
    return await _next_payload(team_id, settings, now, resolutions)


@app.get("/next/{team_id}", response_model=DisplayPayloadOut)
async def get_next_up_for_team(
    team_id: int,
    settings: GatewaySettings = Depends(get_settings),
    now: datetime = Depends(get_now),
    resolutions: ResolutionLog = Depends(get_resolution_log),
):
    return await _next_payload(team_id, settings, now, resolutions)


@app.get("/api/resolutions", response_model=ResolutionsResponse)
def api_resolutions(
    limit: int = 50,
    team: int | None = None,
    resolutions: ResolutionLog = Depends(get_resolution_log),
):
    return {"entries": resolutions.entries(limit=limit, team_id=team)}


@app.get("/healthz")
def healthz():
    return {"ok": True}
