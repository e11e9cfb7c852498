"""Activity log: one document per authenticated API call worth auditing."""
import logging
from datetime import datetime, timezone
from typing import Any

import database
from schemas import Log

logger = logging.getLogger(__name__)


def log_activity(user_id: Any, category: str, type: str, data: Any = None) -> str:
    logger.info("%s %s by %s", category, type, user_id)
    entry = Log(userId=user_id, category=category, type=type, data=data, date=datetime.now(timezone.utc))
    return database.create_document("log", entry)
