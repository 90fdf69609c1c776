"""HTTP endpoints for the classic and bonus variants."""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse

from power4 import config
from power4.models import ErrorResponse, GameSnapshot, MoveRequest, MoveResult, StartGameRequest
from power4.session import BONUS, CLASSIC, Session, session_manager

router = APIRouter(prefix="/api")

NOT_STARTED = {404: {"model": ErrorResponse}}


async def current_session(request: Request) -> Session:
    """Look up the caller's session from its cookie, creating one if needed."""
    session_id = request.cookies.get(config.SESSION_COOKIE)
    session = session_manager.get_or_create(session_id)
    if session.session_id != session_id:
        request.state.new_session_id = session.session_id
    return session


async def attach_session_cookie(request: Request, call_next):
    """Hand a newly created session id back to the client, error responses included."""
    response = await call_next(request)
    session_id = getattr(request.state, "new_session_id", None)
    if session_id is not None:
        response.set_cookie(config.SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


@router.delete("/session", status_code=204)
async def end_session(request: Request, response: Response):
    session_manager.end_session(request.cookies.get(config.SESSION_COOKIE))
    response.delete_cookie(config.SESSION_COOKIE)


# ---------------------------------------------------------------------------
# Classic 6x7 game
# ---------------------------------------------------------------------------

@router.get("/game", response_model=GameSnapshot)
async def get_game(session: Session = Depends(current_session)):
    return await session_manager.snapshot(session, CLASSIC)


@router.post("/move", response_model=MoveResult, responses={400: {"model": ErrorResponse}})
async def move(body: MoveRequest, session: Session = Depends(current_session)):
    return await session_manager.play_move(session, CLASSIC, body.column)


@router.post("/new-game", response_model=GameSnapshot)
async def new_game(session: Session = Depends(current_session)):
    return await session_manager.new_game(session, CLASSIC)


@router.post("/reset-scores", response_model=GameSnapshot)
async def reset_scores(session: Session = Depends(current_session)):
    return await session_manager.reset_scores(session, CLASSIC)


# ---------------------------------------------------------------------------
# Bonus game: custom size, nicknames, gravity inversion
# ---------------------------------------------------------------------------

@router.get("/bonus", include_in_schema=False)
async def bonus_root():
    return RedirectResponse("/api/bonus/game", status_code=303)


@router.post("/bonus/start-game", response_model=GameSnapshot)
async def start_bonus_game(
    body: StartGameRequest | None = None, session: Session = Depends(current_session)
):
    return await session_manager.start_bonus_game(session, body or StartGameRequest())


@router.get("/bonus/game", response_model=GameSnapshot, responses=NOT_STARTED)
async def get_bonus_game(session: Session = Depends(current_session)):
    return await session_manager.snapshot(session, BONUS)


@router.post(
    "/bonus/move",
    response_model=MoveResult,
    responses={**NOT_STARTED, 400: {"model": ErrorResponse}},
)
async def bonus_move(body: MoveRequest, session: Session = Depends(current_session)):
    return await session_manager.play_move(session, BONUS, body.column)


@router.post("/bonus/new-game", response_model=GameSnapshot, responses=NOT_STARTED)
async def bonus_new_game(session: Session = Depends(current_session)):
    return await session_manager.new_game(session, BONUS)


@router.post("/bonus/reset-scores", response_model=GameSnapshot, responses=NOT_STARTED)
async def bonus_reset_scores(session: Session = Depends(current_session)):
    return await session_manager.reset_scores(session, BONUS)
