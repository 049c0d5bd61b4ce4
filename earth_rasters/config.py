import os
from pathlib import Path

RESOURCE_DIR = os.getenv("EARTH_RASTERS_RESOURCE_DIR", str(Path.home() / "resources"))
BASE_URL = os.getenv("EARTH_RASTERS_BASE_URL", "https://storage.googleapis.com/statgeochem")
DOWNLOAD_TIMEOUT = int(os.getenv("EARTH_RASTERS_TIMEOUT", "600"))
LOG_LEVEL = os.getenv("EARTH_RASTERS_LOG_LEVEL", "INFO")
