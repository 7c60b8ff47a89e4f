"""pdok-apis configuration: registry hosts, credentials, timeouts and logging."""

from pydantic import model_validator
from pydantic_settings import BaseSettings

from pdokapis import __version__


class Settings(BaseSettings):
    # Identification sent with every registry request
    user_agent: str = f"pdok-apis/{__version__}"

    # BAG requires an API key (X-Api-Key header); PDOK services are public
    bag_api_key: str = ""

    @model_validator(mode="after")
    def _strip_api_keys(self) -> "Settings":
        """Strip whitespace/newlines from API keys: common paste error in .env files."""
        if self.bag_api_key and self.bag_api_key != self.bag_api_key.strip():
            self.bag_api_key = self.bag_api_key.strip()
        return self

    # Registry base URLs: override to point at a local stand-in service
    locatieserver_url: str = "https://api.pdok.nl/bzk/locatieserver/search/v3_1"
    brk_url: str = "https://service.pdok.nl/kadaster/kadastralekaart/wfs/v5_0"
    bag_url: str = "https://api.bag.kadaster.nl/lvbag/individuelebevragingen/v2"

    @model_validator(mode="after")
    def _normalize_base_urls(self) -> "Settings":
        """Drop trailing slashes so paths can be joined with a single '/'."""
        for field in ("locatieserver_url", "brk_url", "bag_url"):
            setattr(self, field, getattr(self, field).rstrip("/"))
        return self

    # Building resolution: number of linked Pand fetches in flight at once.
    # 1 keeps the fetches strictly sequential.
    resolver_max_concurrency: int = 1

    # MLflow tracing sink
    mlflow_tracking_uri: str = "sqlite:///mlruns/mlflow.db"
    mlflow_experiment_name: str = "pdok-apis"

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
