from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    db_host: str = "localhost"
    db_port: int = 54377
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "walletsync"
    debug: bool = False

    token_registry_url: str = "https://tokens.cardano.org"
    token_registry_timeout: float = 5.0
    token_registry_batch_timeout: float = 10.0
    token_registry_batch_timeout_per_unit: float = 0.05
    token_registry_max_batch_timeout: float = 60.0
    token_cache_size: int = 1000

    blockfrost_project_id: str = ""
    blockfrost_network: str = "mainnet"
    http_rate_per_second: float = 10.0

    dust_threshold_lovelace: int = 10_000_000  # 10 ADA; smaller ADA moves count as fee noise

    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    class Config:
        env_file = ".env"


settings = Settings()
