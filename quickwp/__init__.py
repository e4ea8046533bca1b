"""
QuickWP: herramientas para el REST API de WordPress (Application Passwords)
"""

from .client import QuickWP
from .config import ConfigLoader, SiteConfig
from .models import RequestResult, UploadedFile
from .rest_client import RestClient

__version__ = "2.0.0"

__all__ = [
    "QuickWP",
    "ConfigLoader",
    "SiteConfig",
    "RequestResult",
    "UploadedFile",
    "RestClient",
]
