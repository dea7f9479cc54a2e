from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_user
from .auth.models import CurrentUser, LoginRequest
from .auth.users import authenticate, get_preferences, set_preferences
from .matching.config import DEFAULT_MATCHING_CONFIG
from .matching.errors import CollaboratorUnavailableError, InvalidProfileError
from .matching.history import HistoryRecorder, InMemoryHistoryStore
from .matching.models import (
    HistoryPage,
    MatchAnalysis,
    Neighborhood,
    PreferenceProfile,
    ScoredCandidate,
)
from .matching.ranking import RankingService
from .neighborhoods.data_store import (
    find_neighborhoods,
    get_neighborhood,
    list_neighborhoods,
    search_neighborhoods,
)
from .neighborhoods.models import NeighborhoodPage

logger = logging.getLogger(__name__)

app = FastAPI(title="NeighborFit Matching API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "neighborfit-secret-change-in-production"),
)

history_store = InMemoryHistoryStore()
ranking_service = RankingService(
    history=HistoryRecorder(history_store, cap=DEFAULT_MATCHING_CONFIG.history_cap),
    config=DEFAULT_MATCHING_CONFIG,
)


def _invalid_profile(exc: InvalidProfileError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"message": str(exc), "needs_preferences": True},
    )


def _unavailable(exc: CollaboratorUnavailableError) -> HTTPException:
    logger.warning("Collaborator unavailable: %s", exc, exc_info=True)
    return HTTPException(status_code=503, detail="Service temporarily unavailable")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/neighborhoods", response_model=NeighborhoodPage)
def neighborhoods(
    city: str | None = None,
    state: str | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    page: int = Query(default=1, ge=1),
) -> NeighborhoodPage:
    try:
        return list_neighborhoods(city=city, state=state, limit=limit, page=page)
    except CollaboratorUnavailableError as exc:
        raise _unavailable(exc) from exc


@app.get("/neighborhoods/search/{query}", response_model=list[Neighborhood])
def search(query: str, limit: int = Query(default=20, ge=1, le=100)) -> list[Neighborhood]:
    try:
        return search_neighborhoods(query, limit=limit)
    except CollaboratorUnavailableError as exc:
        raise _unavailable(exc) from exc


@app.get("/neighborhoods/{neighborhood_id}", response_model=Neighborhood)
def neighborhood_detail(neighborhood_id: str) -> Neighborhood:
    try:
        neighborhood = get_neighborhood(neighborhood_id)
    except CollaboratorUnavailableError as exc:
        raise _unavailable(exc) from exc
    if neighborhood is None:
        raise HTTPException(status_code=404, detail="Neighborhood not found")
    return neighborhood


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me", response_model=CurrentUser)
def auth_me(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    return user


# ── Matching endpoints ───────────────────────────────────────────────────


@app.get("/preferences", response_model=PreferenceProfile)
def read_preferences(user: CurrentUser = Depends(require_user)) -> PreferenceProfile:
    return get_preferences(user.id)


@app.put("/preferences", response_model=PreferenceProfile)
def update_preferences(
    body: PreferenceProfile,
    user: CurrentUser = Depends(require_user),
) -> PreferenceProfile:
    return set_preferences(user.id, body)


@app.get("/matches", response_model=list[ScoredCandidate])
def matches(
    limit: int | None = Query(default=None, ge=1, le=50),
    city: str | None = None,
    state: str | None = None,
    q: str | None = None,
    user: CurrentUser = Depends(require_user),
) -> list[ScoredCandidate]:
    profile = get_preferences(user.id)
    try:
        candidates = find_neighborhoods(city=city, state=state, query=q)
        return ranking_service.rank(user.id, profile, candidates, limit=limit)
    except InvalidProfileError as exc:
        raise _invalid_profile(exc) from exc
    except CollaboratorUnavailableError as exc:
        raise _unavailable(exc) from exc


@app.get("/analyze/{neighborhood_id}", response_model=MatchAnalysis)
def analyze(neighborhood_id: str, user: CurrentUser = Depends(require_user)) -> MatchAnalysis:
    try:
        neighborhood = get_neighborhood(neighborhood_id)
    except CollaboratorUnavailableError as exc:
        raise _unavailable(exc) from exc
    if neighborhood is None:
        raise HTTPException(status_code=404, detail="Neighborhood not found")

    try:
        return ranking_service.analyze(get_preferences(user.id), neighborhood)
    except InvalidProfileError as exc:
        raise _invalid_profile(exc) from exc


@app.get("/history", response_model=HistoryPage)
def history(
    limit: int = Query(default=20, ge=1, le=100),
    user: CurrentUser = Depends(require_user),
) -> HistoryPage:
    entries, total = history_store.recent(user.id, limit)
    return HistoryPage(match_history=entries, count=len(entries), total_matches=total)
