from typing import Literal

from pydantic import PositiveInt
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    environment: Literal["dev", "prod", "test"] = "dev"
    port: PositiveInt = 8000
    log_level: str = "INFO"

    # Agent
    agent_graph: Literal["interruptible", "simple"] = "interruptible"

    # "error" keeps wire compatibility with existing clients
    reject_finish_reason: Literal["error", "cancelled"] = "error"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
