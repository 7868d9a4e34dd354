from .router import router
from .service import notify

__all__ = ["router", "notify"]
