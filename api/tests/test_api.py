"""HTTP-level tests: routing, camelCase payloads and error mapping."""

import asyncio

import pytest

from pokerank.main import app
from pokerank.services.seed_source import StaticSeedSource
from pokerank.storage import EntityUpsert


async def _init(client):
    response = await client.get("/api/init")
    assert response.status_code == 200
    return response.json()


async def _first_two_ids(client):
    rankings = (await client.get("/api/rankings")).json()
    return rankings[0]["id"], rankings[1]["id"]


class TestInit:
    async def test_seeds_empty_store(self, client):
        body = await _init(client)
        assert body == {"success": True, "message": "Initialized 4 Pokémon"}

    async def test_second_call_reports_existing(self, client):
        await _init(client)
        body = await _init(client)
        assert body["message"] == "Database already contains 4 Pokémon"

    async def test_reset_clears_votes(self, client):
        await _init(client)
        winner_id, loser_id = await _first_two_ids(client)
        await client.post("/api/vote", json={"winnerId": winner_id, "loserId": loser_id})

        response = await client.get("/api/init", params={"reset": "true"})

        assert response.json() == {"success": True, "message": "Reset and initialized 4 Pokémon"}
        stats = (await client.get("/api/stats")).json()
        assert stats["totalVotes"] == 0
        assert stats["totalEntities"] == 4

    async def test_unreachable_seed_source_falls_back(self, client):
        app.state.seed_source = StaticSeedSource([])
        body = await _init(client)
        assert body["message"] == "Initialized 4 Pokémon"


class TestMatchup:
    async def test_seeds_on_demand_and_returns_distinct_pair(self, client):
        response = await client.get("/api/matchup")

        assert response.status_code == 200
        body = response.json()
        assert body["entityA"]["id"] != body["entityB"]["id"]
        assert set(body["entityA"]) == {
            "id",
            "naturalKey",
            "displayName",
            "categories",
            "imageUrl",
            "rating",
            "wins",
            "losses",
        }

    async def test_concurrent_first_requests_share_one_seed_lock(self, client):
        responses = await asyncio.gather(*(client.get("/api/matchup") for _ in range(3)))

        assert [r.status_code for r in responses] == [200, 200, 200]
        assert isinstance(app.state.seed_lock, asyncio.Lock)
        stats = (await client.get("/api/stats")).json()
        assert stats["totalEntities"] == 4


class TestVote:
    async def test_vote_updates_ratings_and_returns_next_matchup(self, client):
        await _init(client)
        winner_id, loser_id = await _first_two_ids(client)

        response = await client.post("/api/vote", json={"winnerId": winner_id, "loserId": loser_id})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["vote"]["winnerId"] == winner_id
        assert body["vote"]["winnerRatingDelta"] == 16
        assert body["vote"]["loserRatingDelta"] == -16
        assert body["newMatchup"]["entityA"]["id"] != body["newMatchup"]["entityB"]["id"]

        rankings = (await client.get("/api/rankings")).json()
        assert rankings[0]["id"] == winner_id
        assert rankings[0]["rating"] == 1516
        assert rankings[0]["wins"] == 1
        assert rankings[-1]["id"] == loser_id
        assert rankings[-1]["rating"] == 1484

    async def test_self_vote_is_400(self, client):
        await _init(client)
        response = await client.post("/api/vote", json={"winnerId": 1, "loserId": 1})
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"winnerId": 1},
            {"winnerId": "1", "loserId": 2},
            {"winnerId": 1.5, "loserId": 2},
            {"winnerId": None, "loserId": 2},
        ],
    )
    async def test_malformed_body_is_400(self, client, payload):
        response = await client.post("/api/vote", json=payload)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"].startswith("Invalid request")

    async def test_unknown_entity_is_404(self, client):
        await _init(client)
        response = await client.post("/api/vote", json={"winnerId": 1, "loserId": 9999})

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Pokémon not found: loser (id=9999)",
        }
        stats = (await client.get("/api/stats")).json()
        assert stats["totalVotes"] == 0


class TestRankings:
    async def test_default_limit_and_ranks(self, client):
        await _init(client)
        rankings = (await client.get("/api/rankings")).json()
        assert [r["rank"] for r in rankings] == [1, 2, 3, 4]
        # All tied at 1500, so id order
        assert [r["id"] for r in rankings] == sorted(r["id"] for r in rankings)

    async def test_limit(self, client):
        await _init(client)
        rankings = (await client.get("/api/rankings", params={"limit": 2})).json()
        assert len(rankings) == 2

    async def test_all_sentinel(self, client):
        await _init(client)
        rankings = (await client.get("/api/rankings", params={"limit": 1000})).json()
        assert len(rankings) == 4

    async def test_negative_limit_is_400(self, client):
        response = await client.get("/api/rankings", params={"limit": -1})
        assert response.status_code == 400


class TestRecentVotes:
    async def test_feed(self, client):
        await _init(client)
        winner_id, loser_id = await _first_two_ids(client)
        await client.post("/api/vote", json={"winnerId": winner_id, "loserId": loser_id})

        feed = (await client.get("/api/votes/recent")).json()

        assert len(feed) == 1
        item = feed[0]
        assert item["winner"]["id"] == winner_id
        assert item["loser"]["id"] == loser_id
        assert item["timeAgo"] == "just now"
        assert item["winnerRatingDelta"] == 16

    async def test_empty_feed(self, client):
        assert (await client.get("/api/votes/recent")).json() == []


class TestStats:
    async def test_shape(self, client):
        await _init(client)
        rankings = (await client.get("/api/rankings")).json()
        by_name = {r["displayName"]: r["id"] for r in rankings}
        await client.post(
            "/api/vote",
            json={"winnerId": by_name["Charmander"], "loserId": by_name["Squirtle"]},
        )

        stats = (await client.get("/api/stats")).json()

        assert stats["totalVotes"] == 1
        assert stats["votesToday"] == 1
        assert stats["totalEntities"] == 4
        assert stats["perCategoryWinRate"] == [
            {"type": "Fire", "winRate": 1.0, "wins": 1, "total": 1, "color": "bg-red-500"},
            {"type": "Water", "winRate": 0.0, "wins": 0, "total": 1, "color": "bg-blue-500"},
        ]


class TestInsufficientData:
    async def test_matchup_without_pair_is_503(self, client):
        """A store holding one Pokémon cannot form a pair even after seeding."""
        # Two records, but one pokedex number, so they upsert to one entity
        mew = EntityUpsert(natural_key=151, display_name="Mew", categories=("Psychic",))
        app.state.seed_source = StaticSeedSource([mew, mew])

        response = await client.get("/api/matchup")

        assert response.status_code == 503
        assert response.headers["retry-after"] == "5"
        assert response.json()["success"] is False


class TestOperational:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "ok"}

    async def test_metrics(self, client):
        await _init(client)
        response = await client.get("/metrics")
        assert response.status_code == 200
        assert "pokerank_http_requests_total" in response.text
