"""Webhook event log implementation"""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from uuid import UUID
import hashlib
import json

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...domain.repositories.webhook_event_repository import IWebhookEventRepository
from ..orm.billing_model import WebhookEventModel


class WebhookEventRepositoryImpl(IWebhookEventRepository):

    def __init__(self, session: Session):
        self.session = session

    async def record_new_or_duplicate(
        self,
        dedupe_key: str,
        gateway: str,
        ext_invoice_id: Optional[str],
        event_type: Optional[str],
        payload: Dict[str, Any],
        headers: Dict[str, Any],
    ) -> Tuple[str, bool]:
        payload_hash = hashlib.sha256(
            json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
        ).hexdigest()
        model = WebhookEventModel(
            dedupe_key=dedupe_key,
            gateway=gateway,
            ext_invoice_id=ext_invoice_id,
            event_type=event_type,
            payload=payload,
            headers=headers,
            payload_hash=payload_hash,
        )
        existing = self._get_by_key(dedupe_key)
        if existing is None:
            try:
                self.session.add(model)
                self.session.flush()
                return str(model.id), False
            except IntegrityError:
                # Lost a race with a concurrent delivery of the same event
                self.session.rollback()
                existing = self._get_by_key(dedupe_key)

        existing.attempts += 1
        self.session.flush()
        return str(existing.id), True

    def _get_by_key(self, dedupe_key: str) -> Optional[WebhookEventModel]:
        return self.session.query(WebhookEventModel).filter(WebhookEventModel.dedupe_key == dedupe_key).first()

    def _get_model(self, event_id: str) -> Optional[WebhookEventModel]:
        return self.session.query(WebhookEventModel).filter(WebhookEventModel.id == UUID(event_id)).first()

    async def mark_processed(self, event_id: str, result: str) -> None:
        model = self._get_model(event_id)
        if model:
            model.processed_at = datetime.utcnow()
            model.result = result
            model.error = None
            self.session.flush()

    async def mark_error(self, event_id: str, error: str) -> None:
        model = self._get_model(event_id)
        if model:
            model.error = error[:2000]
            self.session.flush()
