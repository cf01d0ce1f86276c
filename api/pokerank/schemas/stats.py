from pokerank.schemas.common import CamelModel


class CategoryWinRateResponse(CamelModel):
    type: str
    win_rate: float
    wins: int
    total: int
    color: str


class StatsResponse(CamelModel):
    total_votes: int
    total_entities: int
    votes_today: int
    per_category_win_rate: list[CategoryWinRateResponse]
