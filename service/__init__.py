from .models import ServiceConfig
from .server import ResolutionServer

__all__ = ["ResolutionServer", "ServiceConfig"]
