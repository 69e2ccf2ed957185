from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "ThetaWatch"
    API_V1_STR: str = "/api/v1"

    POSTGRES_USER: str = "thetawatch"
    POSTGRES_PASSWORD: str = "secure_password"
    POSTGRES_DB: str = "thetawatch"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    DATABASE_URL: Optional[str] = None

    # Both satellites must have a NORAD id strictly below this to be eligible
    MAXIMUM_NORAD_ID: int = 30000
    # Rows fetched per round trip while walking the conjunctions table
    FIND_BATCH_SIZE: int = 500

    GEOMETRY_LIBRARY_PATH: Optional[str] = None
    # The deployed theta routine has always been fed the first point's
    # time_to_tca for both points of a pair. Awaiting product-owner sign-off.
    THETA_PAIR_USES_FIRST_TCA: bool = True

    ADJUST_INTERVAL_MINUTES: int = 15
    LOG_LEVEL: str = "INFO"

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            # SQLAlchemy no longer accepts the 'postgres://' scheme some providers hand out
            url = self.DATABASE_URL
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            return url
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()
