"""Public health check with a short-lived cache"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.config import settings
from ...db.database import ping_database

logger = logging.getLogger(__name__)

_cache: Dict[str, Any] = {"result": None, "expires_at": 0.0}


def reset_health_cache() -> None:
    _cache["result"] = None
    _cache["expires_at"] = 0.0


class HealthCheckUseCase:

    def __init__(self, db: Session):
        self.db = db

    def execute(self, now: Optional[float] = None) -> Dict[str, Any]:
        now = now if now is not None else time.monotonic()
        if _cache["result"] is not None and now < _cache["expires_at"]:
            return _cache["result"]

        try:
            ping_database(self.db)
            database = "up"
        except SQLAlchemyError as e:
            logger.error("Health check database ping failed: %s", e)
            database = "down"

        result = {
            "status": "ok" if database == "up" else "error",
            "database": database,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        _cache["result"] = result
        _cache["expires_at"] = now + settings.HEALTH_CACHE_TTL_SECONDS
        return result
