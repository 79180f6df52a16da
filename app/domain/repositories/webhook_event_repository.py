"""Webhook event log interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple


class IWebhookEventRepository(ABC):

    @abstractmethod
    async def record_new_or_duplicate(
        self,
        dedupe_key: str,
        gateway: str,
        ext_invoice_id: Optional[str],
        event_type: Optional[str],
        payload: Dict[str, Any],
        headers: Dict[str, Any],
    ) -> Tuple[str, bool]:
        """Store the event, returns (event_id, is_duplicate)"""
        pass

    @abstractmethod
    async def mark_processed(self, event_id: str, result: str) -> None:
        pass

    @abstractmethod
    async def mark_error(self, event_id: str, error: str) -> None:
        pass
