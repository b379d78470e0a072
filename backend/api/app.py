from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from activity.activity_service import ActivityService
from api import handlers
from api.settings import ApiServerSettings
from community.community_service import CommunityService
from community.competition_service import CompetitionService
from community.exceptions import (
    CommunityNotFoundError,
    CompetitionNotFoundError,
    CompetitionRuleError,
    DuplicateOrganizerError,
    DuplicatePlayerError,
    PlayerNotFoundError,
)
from community.player_service import PlayerService
from game.logic.exceptions import (
    GameFinishedError,
    GameNotFoundError,
    GameRuleError,
    InvalidGameStateError,
    StaleGameError,
)
from game.logic.game_service import GameService
from ranking.exceptions import RankingDataError
from ranking.service import RankingService
from ranking.statistics import StatisticsService
from shared.db import (
    Database,
    SqliteActivityRepository,
    SqliteCommunityRepository,
    SqliteCompetitionRepository,
    SqliteGameRepository,
    SqlitePlayerRepository,
)
from shared.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request

logger = structlog.get_logger()


@dataclass(frozen=True)
class Services:
    games: GameService
    players: PlayerService
    communities: CommunityService
    competitions: CompetitionService
    rankings: RankingService
    statistics: StatisticsService
    activities: ActivityService


def build_services(db: Database) -> Services:
    """Wire every service to SQLite repositories sharing one connection."""
    games = SqliteGameRepository(db)
    players = SqlitePlayerRepository(db)
    communities = SqliteCommunityRepository(db)
    competitions = SqliteCompetitionRepository(db)
    activities = ActivityService(SqliteActivityRepository(db), games, players)
    return Services(
        games=GameService(games, activities),
        players=PlayerService(players),
        communities=CommunityService(communities, players, activities),
        competitions=CompetitionService(competitions, communities, games, players, activities),
        rankings=RankingService(games, players, communities, competitions),
        statistics=StatisticsService(games, players, communities, competitions),
        activities=activities,
    )


def _error_handler(status_code: int):  # noqa: ANN202
    async def handle(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=status_code)

    return handle


async def _ranking_data_error(_request: Request, exc: Exception) -> JSONResponse:
    logger.error("ranking data unavailable", error=str(exc.__cause__ or exc))
    return JSONResponse({"error": "Ranking data temporarily unavailable"}, status_code=503)


# Starlette picks the handler of the most specific class in the exception's MRO.
EXCEPTION_STATUS = {
    handlers.BadRequestError: 400,
    ValueError: 400,
    GameRuleError: 400,
    CompetitionRuleError: 409,
    GameFinishedError: 409,
    InvalidGameStateError: 409,
    StaleGameError: 409,
    DuplicatePlayerError: 409,
    DuplicateOrganizerError: 409,
    GameNotFoundError: 404,
    PlayerNotFoundError: 404,
    CommunityNotFoundError: 404,
    CompetitionNotFoundError: 404,
}


def create_app(
    settings: ApiServerSettings | None = None,
    db: Database | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = ApiServerSettings()

    # When the app opens its own database, it owns the connection lifecycle.
    owned_db: Database | None = None
    if db is None:
        db = Database(settings.database_path)
        db.connect()
        owned_db = db

    routes = [
        Route("/health", handlers.health, methods=["GET"]),
        Route("/players", handlers.create_player, methods=["POST"]),
        Route("/players", handlers.list_players, methods=["GET"]),
        Route("/players/{player_id}", handlers.get_player, methods=["GET"]),
        Route("/players/{player_id}", handlers.delete_player, methods=["DELETE"]),
        Route("/players/{player_id}/games", handlers.list_player_games, methods=["GET"]),
        Route("/communities", handlers.create_community, methods=["POST"]),
        Route("/communities/{community_id}", handlers.get_community, methods=["GET"]),
        Route("/communities/{community_id}/members", handlers.list_community_members, methods=["GET"]),
        Route("/communities/{community_id}/members", handlers.add_community_member, methods=["POST"]),
        Route(
            "/communities/{community_id}/members/{player_id}",
            handlers.remove_community_member,
            methods=["DELETE"],
        ),
        Route("/communities/{community_id}/organizers", handlers.list_organizers, methods=["GET"]),
        Route("/communities/{community_id}/organizers", handlers.add_organizer, methods=["POST"]),
        Route(
            "/communities/{community_id}/organizers/{user_id}",
            handlers.remove_organizer,
            methods=["DELETE"],
        ),
        Route("/communities/{community_id}/standings", handlers.community_standings, methods=["GET"]),
        Route("/communities/{community_id}/competitions", handlers.list_competitions, methods=["GET"]),
        Route("/communities/{community_id}/competitions", handlers.create_competition, methods=["POST"]),
        Route("/competitions/{competition_id}", handlers.get_competition, methods=["GET"]),
        Route("/competitions/{competition_id}/members", handlers.list_competition_members, methods=["GET"]),
        Route("/competitions/{competition_id}/members", handlers.add_competition_member, methods=["POST"]),
        Route(
            "/competitions/{competition_id}/members/{player_id}",
            handlers.remove_competition_member,
            methods=["DELETE"],
        ),
        Route("/competitions/{competition_id}/start", handlers.start_competition, methods=["POST"]),
        Route("/competitions/{competition_id}/finish", handlers.finish_competition, methods=["POST"]),
        Route("/competitions/{competition_id}/results", handlers.competition_results, methods=["GET"]),
        Route("/competitions/{competition_id}/games", handlers.list_competition_games, methods=["GET"]),
        Route("/competitions/{competition_id}/games", handlers.create_competition_game, methods=["POST"]),
        Route("/games", handlers.list_user_games, methods=["GET"]),
        Route("/games/{game_id}", handlers.get_game, methods=["GET"]),
        Route("/games/{game_id}/start", handlers.start_game, methods=["POST"]),
        Route("/games/{game_id}/rounds", handlers.register_round, methods=["POST"]),
        Route("/rankings/players", handlers.player_rankings, methods=["GET"]),
        Route("/rankings/pairs", handlers.pair_rankings, methods=["GET"]),
        Route("/statistics", handlers.user_statistics, methods=["GET"]),
        Route("/activities", handlers.list_activities, methods=["GET"]),
        Route("/activities/recent", handlers.recent_activities, methods=["GET"]),
    ]

    exception_handlers = {exc_type: _error_handler(status) for exc_type, status in EXCEPTION_STATUS.items()}
    exception_handlers[RankingDataError] = _ranking_data_error

    @asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncIterator[None]:
        yield
        if owned_db is not None:
            owned_db.close()

    app = Starlette(routes=routes, exception_handlers=exception_handlers, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", handlers.ACTOR_HEADER],
    )
    app.state.settings = settings
    app.state.services = build_services(db)

    logger.info("api server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    _settings = ApiServerSettings()
    setup_logging(log_dir=_settings.log_dir)
    return create_app(settings=_settings)
