"""Locust load test: concurrent matchup/vote loop.

Each simulated user repeatedly fetches a matchup and votes for one side,
while a smaller population reads rankings and stats. Exercises the
per-entity locking on the vote path under contention: with a small roster
many concurrent votes hit the same Pokémon.

Run command:
    locust -f tests/load/locustfile_voting.py \\
      --host http://localhost:8000 \\
      --users 50 --spawn-rate 10 --run-time 60s \\
      --headless --only-summary --csv=results/voting

    # Consistency check after the run: sum of wins == sum of losses == totalVotes
    # curl -s localhost:8000/api/stats | jq .totalVotes

Prerequisites:
    1. Start the API (DATABASE_URL set for the SQL adapter, unset for in-memory)
    2. mkdir -p results/
"""

import random

from locust import HttpUser, between, task


class Voter(HttpUser):
    """Fetches a matchup, votes, then votes again on the returned matchup."""

    wait_time = between(0.05, 0.2)

    def on_start(self) -> None:
        self.client.get("/api/init", name="/api/init")
        self._matchup = None

    @task(5)
    def vote(self) -> None:
        if self._matchup is None:
            resp = self.client.get("/api/matchup", name="/api/matchup")
            if resp.status_code != 200:
                return
            self._matchup = resp.json()

        pair = [self._matchup["entityA"], self._matchup["entityB"]]
        random.shuffle(pair)
        winner, loser = pair

        resp = self.client.post(
            "/api/vote",
            json={"winnerId": winner["id"], "loserId": loser["id"]},
            name="/api/vote",
        )
        # A reset by another user can make ids stale; fetch a fresh pair next time
        self._matchup = resp.json()["newMatchup"] if resp.status_code == 200 else None


class Spectator(HttpUser):
    """Reads the derived views while votes are landing."""

    wait_time = between(0.5, 1.5)

    @task(3)
    def rankings(self) -> None:
        self.client.get("/api/rankings?limit=10", name="/api/rankings")

    @task(2)
    def recent(self) -> None:
        self.client.get("/api/votes/recent?limit=5", name="/api/votes/recent")

    @task(1)
    def stats(self) -> None:
        self.client.get("/api/stats", name="/api/stats")
