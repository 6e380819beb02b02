from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "", "case_sensitive": False}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "BESS ROI"
    cors_origins: str = "http://localhost:3000"

    # Logging
    log_json: bool = False
    log_level: str = "INFO"

    # Fuel curve reference data (.json or .csv); built-in table when unset
    fuel_curve_path: str | None = None

    # Rate limiting
    calc_rate_limit: int = 60
    calc_rate_window_seconds: int = 60
    # Only enable behind a proxy that sets X-Forwarded-For itself
    trust_forwarded_for: bool = False

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
