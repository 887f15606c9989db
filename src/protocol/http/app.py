from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field

from .error import (
    chess_error_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from .settings import ServerSettings
from ...engine.errors import ChessError, IllegalMoveError, NotYourTurnError
from ...engine.game import Game
from ...engine.move import Move, Square
from ...engine.piece import Color, PieceType


logger = logging.getLogger(__name__)


class SquareModel(BaseModel):
    row: int = Field(..., ge=0, le=7, description="0 = black's home rank")
    col: int = Field(..., ge=0, le=7, description="0 = a-file")

    @classmethod
    def of(cls, sq: Square) -> "SquareModel":
        return cls(row=sq.row, col=sq.col)

    def to_square(self) -> Square:
        return Square(self.row, self.col)


class MoveModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: SquareModel = Field(..., alias="from")
    to: SquareModel

    def to_move(self) -> Move:
        return Move(self.from_.to_square(), self.to.to_square())


class PieceModel(BaseModel):
    type: PieceType
    color: Color


class SetPositionRequest(BaseModel):
    layout: str = Field(..., description="8 lines of 8 chars, '.' empty, PNBRQK white, pnbrqk black")
    turn: Color = Color.WHITE


class LegalResponse(BaseModel):
    legal: bool


class GameState(BaseModel):
    game_id: str
    board: List[List[Optional[PieceModel]]]
    turn: Color
    en_passant_target: Optional[SquareModel]
    last_move: Optional[MoveModel]
    move_count: int


def _state(game_id: str, game: Game) -> GameState:
    board = [
        [PieceModel(type=p.piece_type, color=p.color) if p else None for p in row]
        for row in game.board.rows()
    ]
    ep = game.en_passant_target
    last = game.last_move
    return GameState(
        game_id=game_id,
        board=board,
        turn=game.turn,
        en_passant_target=SquareModel.of(ep) if ep else None,
        last_move=(
            MoveModel(from_=SquareModel.of(last.from_sq), to=SquareModel.of(last.to_sq))
            if last
            else None
        ),
        move_count=game.move_count,
    )


def create_app(settings: Optional[ServerSettings] = None) -> FastAPI:
    settings = settings or ServerSettings.from_env()
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    logging.basicConfig(level=settings.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ChessError, chess_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore(max_games=settings.max_games)
    app.state.store = store
    app.state.settings = settings

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=GameState)
    async def create_game() -> GameState:
        game = Game.new()
        game_id = store.create(game)
        logger.info("created game", extra={"game_id": game_id})
        return _state(game_id, game)

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _with_game(store, game_id, lambda g: _state(game_id, g))

    @app.post("/api/games/{game_id}/legal", response_model=LegalResponse)
    async def check_legal(game_id: str, req: MoveModel) -> LegalResponse:
        move = req.to_move()
        return _with_game(store, game_id, lambda g: LegalResponse(legal=g.is_legal(move)))

    @app.get("/api/games/{game_id}/destinations", response_model=List[SquareModel])
    async def destinations(
        game_id: str,
        row: int = Query(..., ge=0, le=7),
        col: int = Query(..., ge=0, le=7),
    ) -> List[SquareModel]:
        sq = Square(row, col)
        return _with_game(
            store, game_id, lambda g: [SquareModel.of(d) for d in g.destinations(sq)]
        )

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveModel) -> GameState:
        move = req.to_move()

        def _play(game: Game) -> GameState:
            try:
                game.play(move)
            except NotYourTurnError as e:
                raise HTTPException(status_code=409, detail=str(e))
            except IllegalMoveError:
                raise HTTPException(status_code=400, detail="illegal move")
            return _state(game_id, game)

        return _with_game(store, game_id, _play)

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        # LayoutError propagates to chess_error_handler (400)
        game = Game.from_layout(req.layout, turn=req.turn)
        try:
            store.set(game_id, game)
        except KeyError:
            raise HTTPException(status_code=404, detail="game not found")
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/reset", response_model=GameState)
    async def reset(game_id: str) -> GameState:
        def _reset(game: Game) -> GameState:
            game.reset()
            return _state(game_id, game)

        return _with_game(store, game_id, _reset)

    @app.delete("/api/games/{game_id}", status_code=204)
    async def delete_game(game_id: str) -> Response:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return Response(status_code=204)

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _with_game(store: InMemorySessionStore, game_id: str, fn):
    try:
        return store.with_game(game_id, fn)
    except KeyError:
        raise HTTPException(status_code=404, detail="game not found")
