from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come from the process environment; unknown variables are ignored.
    model_config = SettingsConfigDict(extra="ignore")

    # --- Storage ---
    DATABASE_URL: str = "sqlite:///./weekly_rsvp.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # --- Eligibility ---
    AGE_MIN: int = 15
    AGE_MAX: int = 65
    CHECK_AGE: bool = False
    CHECK_VACCINATED: bool = False

    # --- Capacity ---
    MAX_ATTENDEE_ATTENDANCE: int = 250
    MAX_VOLUNTEER_ATTENDANCE: int = 250

    # --- Locking (seconds) ---
    LOCK_TIMEOUT: int = 10
    LOCK_BLOCKING_TIMEOUT: int = 5

    # --- Weekly schedule (UTC) ---
    EVENT_NAME_PREFIX: str = "Sunday Service"
    CREATE_EVENT_DAY_OF_WEEK: str = "sun"
    CREATE_EVENT_HOUR: int = 2
    CREATE_EVENT_MINUTE: int = 0
    CLOSE_REGISTRATION_DAY_OF_WEEK: str = "fri"
    CLOSE_REGISTRATION_HOUR: int = 9
    CLOSE_REGISTRATION_MINUTE: int = 0

    @property
    def TOTAL_ATTENDANCE(self) -> int:
        return self.MAX_ATTENDEE_ATTENDANCE + self.MAX_VOLUNTEER_ATTENDANCE


settings = Settings()


def get_settings() -> Settings:
    return settings
