from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    env: str = "development"
    database_url: str = "sqlite:///./contest.db"
    sql_echo: bool = False
    log_level: str = "INFO"
    ranking_limit: int = 10

    class Config:
        env_file = ".env"
        env_prefix = ""
        case_sensitive = False

settings = Settings()
