from .loader import load_settings
from .models import PathsSettings, Settings

__all__ = ["load_settings", "Settings", "PathsSettings"]
