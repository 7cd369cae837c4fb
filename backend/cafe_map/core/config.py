from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Storage mode: "mongodb" or "local"
    STORAGE_MODE: str = "local"
    DATA_DIR: str = "data"

    # MongoDB Configuration (only needed if STORAGE_MODE=mongodb)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "cafe_map_db"

    LOGGER: int = 20
    LOG_DIR: str = "logs"

    # Overpass Configuration
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    OVERPASS_TIMEOUT: int = 25

    # Bounding box searched for cafes (defaults cover Kyiv)
    BBOX_SOUTH: float = 50.1
    BBOX_WEST: float = 30.0
    BBOX_NORTH: float = 50.8
    BBOX_EAST: float = 31.0

    ADDRESS_STREET_PREFIX: str = "вул."

    # 0 disables the Overpass response cache
    CACHE_TTL_SECONDS: int = 3600

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def bbox(self) -> tuple[float, float, float, float]:
        return (self.BBOX_SOUTH, self.BBOX_WEST, self.BBOX_NORTH, self.BBOX_EAST)

settings = Settings()
