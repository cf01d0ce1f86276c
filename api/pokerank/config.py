from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Empty database_url selects the in-memory storage adapter
    database_url: str = ""
    app_name: str = "PokeRank"
    debug: bool = False
    log_level: str = "INFO"

    # Rating engine
    default_rating: int = 1500
    k_factor: int = 32

    # Rankings: any limit at or above this returns every ranked entity
    rankings_all_threshold: int = 1000

    # Seed roster
    seed_roster_size: int = 1025
    seed_api_fetch_limit: int = 20
    seed_api_base_url: str = "https://pokeapi.co/api/v2"
    seed_api_timeout_seconds: float = 5.0
    seed_sprite_base_url: str = (
        "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon"
    )


settings = Settings()
