"""HTTP handlers: parse the request, call a service, serialize the result.

Domain errors propagate to the exception handlers registered in api.app.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError
from starlette.responses import JSONResponse, Response

from activity.activity_service import DEFAULT_PAGE_SIZE, RECENT_ACTIVITY_LIMIT
from api.types import (
    CreateCommunityRequest,
    CreateCompetitionRequest,
    CreateGameRequest,
    CreatePlayerRequest,
    MemberRequest,
    OrganizerRequest,
    RegisterRoundRequest,
)

if TYPE_CHECKING:
    from starlette.requests import Request

    from api.app import Services
    from ranking.models import Standings

ACTOR_HEADER = "X-Actor-Id"
_MAX_REQUEST_BODY_SIZE = 4096


class BadRequestError(Exception):
    """Request is malformed before it reaches a service."""


def _services(request: Request) -> Services:
    return request.app.state.services


def _actor_id(request: Request) -> str:
    actor_id = request.headers.get(ACTOR_HEADER, "").strip()
    if not actor_id:
        raise BadRequestError(f"Missing {ACTOR_HEADER} header")
    return actor_id


def _optional_actor_id(request: Request) -> str | None:
    return request.headers.get(ACTOR_HEADER, "").strip() or None


def _int_query(request: Request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise BadRequestError(f"Query parameter {name} must be an integer") from exc


async def _parse_body[T: BaseModel](request: Request, model: type[T]) -> T:
    raw_body = await request.body()
    if len(raw_body) > _MAX_REQUEST_BODY_SIZE:
        raise BadRequestError("Request body too large")
    try:
        body = json.loads(raw_body)
        return model(**body)
    except (ValueError, TypeError, json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:  # fmt: skip
        raise BadRequestError("Invalid request body") from exc


def _json(model: BaseModel, status_code: int = 200) -> JSONResponse:
    return JSONResponse(model.model_dump(mode="json"), status_code=status_code)


def _json_list(models: list, status_code: int = 200) -> JSONResponse:
    return JSONResponse([m.model_dump(mode="json") for m in models], status_code=status_code)


def _standings_json(standings: Standings) -> JSONResponse:
    return JSONResponse({**standings.model_dump(mode="json"), "champions": list(standings.champions)})


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


# Players


async def create_player(request: Request) -> JSONResponse:
    actor_id = _actor_id(request)
    body = await _parse_body(request, CreatePlayerRequest)
    player = await _services(request).players.create_player(
        actor_id,
        body.name,
        phone=body.phone,
        user_id=body.user_id,
    )
    return _json(player, status_code=201)


async def list_players(request: Request) -> JSONResponse:
    return _json_list(await _services(request).players.list_players(_actor_id(request)))


async def get_player(request: Request) -> JSONResponse:
    return _json(await _services(request).players.get_player(request.path_params["player_id"]))


async def delete_player(request: Request) -> Response:
    services = _services(request)
    player_id = request.path_params["player_id"]
    await services.players.get_player(player_id)
    await services.players.delete_player(player_id)
    return Response(status_code=204)


async def list_player_games(request: Request) -> JSONResponse:
    services = _services(request)
    player_id = request.path_params["player_id"]
    await services.players.get_player(player_id)
    return _json_list(await services.games.list_player_games(player_id))


# Communities


async def create_community(request: Request) -> JSONResponse:
    actor_id = _actor_id(request)
    body = await _parse_body(request, CreateCommunityRequest)
    community = await _services(request).communities.create_community(actor_id, body.name, body.description)
    return _json(community, status_code=201)


async def get_community(request: Request) -> JSONResponse:
    return _json(await _services(request).communities.get_community(request.path_params["community_id"]))


async def list_community_members(request: Request) -> JSONResponse:
    return _json_list(await _services(request).communities.list_members(request.path_params["community_id"]))


async def add_community_member(request: Request) -> Response:
    body = await _parse_body(request, MemberRequest)
    await _services(request).communities.add_member(request.path_params["community_id"], body.player_id)
    return Response(status_code=204)


async def remove_community_member(request: Request) -> Response:
    await _services(request).communities.remove_member(
        request.path_params["community_id"],
        request.path_params["player_id"],
    )
    return Response(status_code=204)


async def list_organizers(request: Request) -> JSONResponse:
    organizers = await _services(request).communities.list_organizers(request.path_params["community_id"])
    return JSONResponse(organizers)


async def add_organizer(request: Request) -> Response:
    actor_id = _actor_id(request)
    body = await _parse_body(request, OrganizerRequest)
    await _services(request).communities.add_organizer(request.path_params["community_id"], body.user_id, actor_id)
    return Response(status_code=204)


async def remove_organizer(request: Request) -> Response:
    await _services(request).communities.remove_organizer(
        request.path_params["community_id"],
        request.path_params["user_id"],
    )
    return Response(status_code=204)


async def community_standings(request: Request) -> JSONResponse:
    standings = await _services(request).rankings.get_community_standings(request.path_params["community_id"])
    return _standings_json(standings)


# Competitions


async def create_competition(request: Request) -> JSONResponse:
    actor_id = _actor_id(request)
    body = await _parse_body(request, CreateCompetitionRequest)
    competition = await _services(request).competitions.create_competition(
        actor_id,
        request.path_params["community_id"],
        body.name,
        body.start_date,
    )
    return _json(competition, status_code=201)


async def list_competitions(request: Request) -> JSONResponse:
    services = _services(request)
    community_id = request.path_params["community_id"]
    await services.communities.get_community(community_id)
    return _json_list(await services.competitions.list_competitions(community_id))


async def get_competition(request: Request) -> JSONResponse:
    return _json(await _services(request).competitions.get_competition(request.path_params["competition_id"]))


async def list_competition_members(request: Request) -> JSONResponse:
    return _json_list(await _services(request).competitions.list_members(request.path_params["competition_id"]))


async def add_competition_member(request: Request) -> Response:
    body = await _parse_body(request, MemberRequest)
    await _services(request).competitions.add_member(request.path_params["competition_id"], body.player_id)
    return Response(status_code=204)


async def remove_competition_member(request: Request) -> Response:
    await _services(request).competitions.remove_member(
        request.path_params["competition_id"],
        request.path_params["player_id"],
    )
    return Response(status_code=204)


async def start_competition(request: Request) -> JSONResponse:
    return _json(await _services(request).competitions.start_competition(request.path_params["competition_id"]))


async def finish_competition(request: Request) -> JSONResponse:
    standings = await _services(request).competitions.finish_competition(
        request.path_params["competition_id"],
        actor_id=_optional_actor_id(request),
    )
    return _standings_json(standings)


async def competition_results(request: Request) -> JSONResponse:
    standings = await _services(request).competitions.get_competition_results(request.path_params["competition_id"])
    return _standings_json(standings)


async def create_competition_game(request: Request) -> JSONResponse:
    body = await _parse_body(request, CreateGameRequest)
    game = await _services(request).competitions.create_game(
        request.path_params["competition_id"],
        body.team1,
        body.team2,
    )
    return _json(game, status_code=201)


async def list_competition_games(request: Request) -> JSONResponse:
    services = _services(request)
    competition_id = request.path_params["competition_id"]
    await services.competitions.get_competition(competition_id)
    return _json_list(await services.games.list_by_competition(competition_id))


# Games


async def list_user_games(request: Request) -> JSONResponse:
    return _json_list(await _services(request).competitions.list_user_games(_actor_id(request)))


async def get_game(request: Request) -> JSONResponse:
    return _json(await _services(request).games.get_game(request.path_params["game_id"]))


async def start_game(request: Request) -> JSONResponse:
    return _json(await _services(request).games.start_game(request.path_params["game_id"]))


async def register_round(request: Request) -> JSONResponse:
    body = await _parse_body(request, RegisterRoundRequest)
    game = await _services(request).games.register_round(
        request.path_params["game_id"],
        body.victory_type,
        body.winner_team,
        actor_id=_optional_actor_id(request),
    )
    return _json(game)


# Rankings and statistics


def _ranking_scope(request: Request) -> tuple[str | None, str | None]:
    return request.query_params.get("community_id") or None, _optional_actor_id(request)


async def player_rankings(request: Request) -> JSONResponse:
    community_id, actor_id = _ranking_scope(request)
    rankings = await _services(request).rankings.get_player_rankings(community_id, actor_id=actor_id)
    return _json_list(rankings)


async def pair_rankings(request: Request) -> JSONResponse:
    community_id, actor_id = _ranking_scope(request)
    rankings = await _services(request).rankings.get_pair_rankings(community_id, actor_id=actor_id)
    return _json_list(rankings)


async def user_statistics(request: Request) -> JSONResponse:
    return _json(await _services(request).statistics.get_user_statistics(_actor_id(request)))


# Activity feed


async def list_activities(request: Request) -> JSONResponse:
    page = _int_query(request, "page", 1)
    page_size = _int_query(request, "page_size", DEFAULT_PAGE_SIZE)
    return _json(await _services(request).activities.list_page(page, page_size))


async def recent_activities(request: Request) -> JSONResponse:
    limit = _int_query(request, "limit", RECENT_ACTIVITY_LIMIT)
    return _json_list(await _services(request).activities.list_recent(limit))
