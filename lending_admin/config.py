"""Application settings."""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 8788
    debug: bool = False

    store_backend: str = "memory"
    data_dir: Path = Path.home() / ".lending-admin" / "data"

    batch_size: int = 500  # document store limit per atomic batch
    backup_retention_days: int = 30
    rollback_retention_days: int = 7
    preview_sample_size: int = 5
    preview_error_limit: int = 10

    loans_collection: str = "loanRequests"
    reservations_collection: str = "reservations"
    equipment_collection: str = "equipmentManagement"
    archives_collection: str = "dataArchives"
    rollbacks_collection: str = "importRollbacks"
    audit_collection: str = "dataManagementAuditLog"

    model_config = {"env_prefix": "LENDING_"}


settings = Settings()
