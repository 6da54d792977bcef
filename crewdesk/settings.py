import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CREWDESK_", extra="ignore")

    db_url: str = "mysql+pymysql://crewdesk:crewdesk@db:3306/crewdesk"
    db_pool_timeout: int = 10  # seconds waiting for a pooled connection
    db_connect_timeout: int = 10

    storage_backend: str = "local"
    storage_local_path: str = "./uploads"
    storage_prefix: str = "crewdesk"
    storage_public_base_url: str = ""

    s3_bucket: str = ""
    s3_region: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_endpoint_url: str = ""
    s3_presigned_expiry: int = 604800  # 7 days in seconds
    s3_timeout: int = 10
    s3_max_attempts: int = 3

    default_currency: str = "AED"
    avatar_placeholder_url: str = "/images/user/owner.jpg"

    log_level: str = "INFO"
    log_json: bool = False
    log_sql: bool = False


settings = Settings()
