import os
from pydantic import BaseModel

class Settings(BaseModel):
    # Basic
    ENV: str = os.getenv("ENV", "dev")
    PORT: int = int(os.getenv("PORT", "8080"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Prediction model upstream
    MODEL_BASE: str = os.getenv("MODEL_BASE", "https://vertex-ml-app-338850593340.europe-west1.run.app")
    UPSTREAM_TIMEOUT_SECONDS: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "5"))
    # One extra direct call to /predict once every shape has missed
    PREDICT_FINAL_ATTEMPT: bool = os.getenv("PREDICT_FINAL_ATTEMPT", "true").lower() == "true"

    # Recommendation upstream
    RECOMMENDER_URL: str = os.getenv(
        "RECOMMENDER_URL",
        "https://estate-mate-recommendation-model-338850593340.europe-west1.run.app/recommend",
    )

    # Chat webhook
    CHAT_PROVIDER: str = os.getenv("CHAT_PROVIDER", "http")          # mock | http
    CHAT_WEBHOOK_URL: str | None = os.getenv(
        "CHAT_WEBHOOK_URL",
        "https://if33d4l0t.app.n8n.cloud/webhook/df2e591c-d024-45db-8460-d8b0f10964d7",
    )

    # Data warehouse
    WAREHOUSE_PROVIDER: str = os.getenv("WAREHOUSE_PROVIDER", "mock")  # mock | bigquery
    BQ_PROJECT: str = os.getenv("BQ_PROJECT", "capstone-project-470009")
    BQ_DATASET: str = os.getenv("BQ_DATASET", "real_estate_aggregated_data")
    BQ_TABLE: str = os.getenv("BQ_TABLE", "current_listings")
    BQ_LOCATION: str = os.getenv("BQ_LOCATION", "us-central1")
    GCP_SERVICE_ACCOUNT_JSON: str | None = os.getenv("GCP_SERVICE_ACCOUNT_JSON")

    # Session preferences
    PREFS_TTL_SECONDS: int = int(os.getenv("PREFS_TTL_SECONDS", "86400"))
    USE_REDIS: bool = os.getenv("USE_REDIS", "false").lower() == "true"
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # CORS
    ALLOW_ORIGINS: str = os.getenv("ALLOW_ORIGINS", "*")

    # Metrics
    PROMETHEUS_ENABLED: bool = os.getenv("PROMETHEUS_ENABLED", "true").lower() == "true"

    # Static site
    WEB_ROOT: str = os.getenv("WEB_ROOT", "./web")

settings = Settings()
