"""Notifier delivering adaptive errors to an HTTP webhook.

This module provides a thin wrapper around ``requests.Session`` posting one
JSON document per notification. Delivery failures are raised as
``NotifierError``; the dispatcher lets them propagate to the scenario caller.

Dependencies:
    - ``requests`` for network I/O.
    - ``scenarist.domain.errors.NotifierError`` for typed delivery failures.

Call context:
    - Installed by applications with ``Scenario.set_default_notifier`` or
      passed as ``notifier=`` when constructing a scenario.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from scenarist.domain.errors import AdaptiveError, NotifierError, NotifyLevel


@dataclass
class WebhookConfig:
    """Timeout and retry configuration for webhook delivery.

    Attributes:
        timeout_s: Timeout in seconds for a single POST.
        retries: Number of retry attempts after the initial request.
        api_key: Optional value sent in the ``X-API-Key`` header.
        source: Free-form sender label included in every payload.
    """
    timeout_s: float = 5.0
    retries: int = 2
    api_key: Optional[str] = None
    source: str = "scenarist"


class WebhookNotifier:
    """Post notifications as JSON to a single webhook URL."""

    def __init__(
        self,
        url: str,
        config: Optional[WebhookConfig] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create a webhook notifier.

        Args:
            url: Absolute endpoint receiving the POST requests.
            config: Timeout, retry, and header settings.
            session: Optional pre-configured session, mainly for tests.

        Side Effects:
            Creates a persistent ``requests.Session`` when none is given.
        """
        if not isinstance(url, str) or not url.strip():
            raise ValueError("Webhook URL must be a non-empty string.")
        self.url = url.strip()
        self.cfg = config or WebhookConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(__name__)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.cfg.api_key:
            headers["X-API-Key"] = self.cfg.api_key
        return headers

    def payload(self, error: AdaptiveError, level: NotifyLevel) -> Dict[str, Any]:
        """Build the JSON document describing ``error``."""
        return {
            "source": self.cfg.source,
            "level": NotifyLevel.parse(level).value,
            "code": error.code,
            "error": type(error).__name__,
            "message": error.message(),
            "details": _jsonable(error.details),
            "sent_at": datetime.now(timezone.utc).isoformat(),
        }

    def post(self, error: AdaptiveError, level: NotifyLevel) -> None:
        """Deliver one notification.

        Raises:
            NotifierError: If every attempt fails with a timeout/connection
                error, if ``requests`` rejects the request outright, or if the
                endpoint answers with a non-2xx status.
        """
        context = f"POST {self.url}"
        data = json.dumps(self.payload(error, level))
        attempts = max(int(self.cfg.retries), 0) + 1
        response = None
        for attempt in range(1, attempts + 1):
            try:
                response = self.session.post(
                    self.url,
                    data=data,
                    headers=self._headers(),
                    timeout=self.cfg.timeout_s,
                )
                break
            except (req_exc.Timeout, req_exc.ConnectionError):
                self._log.debug("Webhook attempt %d/%d failed: %s", attempt, attempts, context)
            except req_exc.RequestException as exc:
                raise NotifierError(f"{context}: {exc}", context=context) from exc
        if response is None:
            raise NotifierError(f"Timeout contacting {self.url}", context=context)
        status = int(getattr(response, "status_code", 0) or 0)
        if not 200 <= status < 300:
            raise NotifierError(f"{context}: HTTP {status}", status=status, context=context)


def _jsonable(details: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in details.items():
        if value is None or isinstance(value, (str, int, float, bool)):
            out[str(key)] = value
        else:
            out[str(key)] = str(value)
    return out


__all__ = ["WebhookConfig", "WebhookNotifier"]
