"""Cliente HTTP del endpoint de OCR (autenticado con bearer token)."""

import logging
from typing import Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class OCRClient:
    def __init__(self, token: str, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.token = token
        self.url = base_url or settings.OCR_SERVICE_URL
        self.timeout = float(timeout if timeout is not None else settings.OCR_TIMEOUT_SECONDS)

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    def process(self, doc_id: int) -> bool:
        try:
            response = httpx.post(
                self.url,
                headers=self._headers(),
                json={"document_id": doc_id},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning("[ocr] request failed for doc_id=%s: %s", doc_id, exc)
            return False
        if response.is_error:
            logger.warning(
                "[ocr] processing failed for doc_id=%s: %s %s",
                doc_id, response.status_code, response.text[:500],
            )
            return False
        logger.info("[ocr] processing successful for doc_id=%s", doc_id)
        return True
