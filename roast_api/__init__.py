"""GitHub Roast API - roasts GitHub profiles with a generative model."""

from .api import app, create_app
from .client import RoastClient, RoastFailedError
from .github import ProfileFetcher
from .models import Language, ProfileRecord
from .roast import RoastGenerator, build_roast_prompt

__version__ = "1.0.0"

__all__ = [
    "Language",
    "ProfileFetcher",
    "ProfileRecord",
    "RoastClient",
    "RoastFailedError",
    "RoastGenerator",
    "app",
    "build_roast_prompt",
    "create_app",
]
