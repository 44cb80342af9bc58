from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class ImporterRules(BaseModel):
    allowed_statuses: list[str] = Field(default_factory=lambda: ["active", "draft", "archived"])
    default_status: str = "active"


class ArchivalRules(BaseModel):
    window_days: int = Field(default=7, ge=0)
    eligible_statuses: list[str] = Field(default_factory=lambda: ["completed", "archived"])
    batch_limit: int = Field(default=200, gt=0)
    purge_default_days: int = Field(default=14, ge=0)


class PhotoRules(BaseModel):
    max_photos: int = Field(default=20, gt=0)
    max_url_bytes: int = Field(default=1024, gt=0)
    max_field_bytes: int = Field(default=1_000_000, gt=0)
    storage_host: str = "firebasestorage.googleapis.com"
    image_extensions: list[str] = Field(
        default_factory=lambda: [
            "png", "jpg", "jpeg", "webp", "gif", "heic", "heif", "bmp", "tif", "tiff"
        ]
    )


class FuelRules(BaseModel):
    diesel_price: float = Field(default=4.10, gt=0)
    gas_price: float = Field(default=3.65, gt=0)


class CacheRules(BaseModel):
    analytics_ttl_seconds: int = Field(default=600, ge=0)


class EventLogRules(BaseModel):
    max_entries: int = Field(default=200, gt=0)
    storage_key: str = "app.logs.v1"


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    cron_secret_env: str = "LOADRUSH_CRON_SECRET"


class Rules(BaseModel):
    project: ProjectRules
    importer: ImporterRules = Field(default_factory=ImporterRules)
    archival: ArchivalRules = Field(default_factory=ArchivalRules)
    photos: PhotoRules = Field(default_factory=PhotoRules)
    fuel: FuelRules = Field(default_factory=FuelRules)
    cache: CacheRules = Field(default_factory=CacheRules)
    event_log: EventLogRules = Field(default_factory=EventLogRules)
    ops: OpsRules = Field(default_factory=OpsRules)
