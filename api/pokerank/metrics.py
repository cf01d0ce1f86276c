from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response

# Voting metrics
votes_recorded = Counter(
    "pokerank_votes_recorded_total",
    "Total votes resolved and appended to the ledger",
)

rating_delta = Histogram(
    "pokerank_rating_delta_points",
    "Absolute winner rating change per vote",
    buckets=[1, 2, 4, 8, 12, 16, 20, 24, 28, 32],
)

# Seeding metrics
seed_fetches = Counter(
    "pokerank_seed_fetches_total",
    "Seed source lookups",
    ["status"],  # status: success | error
)

seed_fallbacks = Counter(
    "pokerank_seed_fallbacks_total",
    "Times seeding fell back to the starter roster",
)

# HTTP request metrics (from middleware)
http_requests = Counter(
    "pokerank_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

http_request_duration = Histogram(
    "pokerank_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


async def metrics_endpoint():
    """FastAPI endpoint handler that returns Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
