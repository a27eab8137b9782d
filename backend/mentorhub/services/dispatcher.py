from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass

from mentorhub.core.config import settings

log = logging.getLogger("mentorhub.dispatcher")

NOTIFY_TYPES = ("info", "success", "warning", "failure")


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    error: str | None = None


class AppriseDispatcher:
    """Client for an Apprise API relay (POST /notify with a list of target URLs)."""

    def __init__(self, base_url: str, *, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def notify(self, urls: list[str], title: str, body: str, notify_type: str = "info") -> DispatchResult:
        """Best-effort delivery to every URL in one relay call. Never raises."""
        if not urls:
            return DispatchResult(ok=False, error="No notification URLs provided")
        if notify_type not in NOTIFY_TYPES:
            notify_type = "info"

        payload = json.dumps(
            {"urls": urls, "title": title, "body": body, "type": notify_type},
            ensure_ascii=False,
        ).encode("utf-8")
        try:
            req = urllib.request.Request(
                self.base_url + "/notify",
                data=payload,
                method="POST",
                headers={"Content-Type": "application/json"},
            )
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                resp.read()
                return DispatchResult(ok=True)
        except urllib.error.HTTPError as e:
            text = e.read().decode("utf-8", errors="ignore") or "Unknown error"
            log.warning("apprise notify failed status=%s body=%s", e.code, text[:300])
            return DispatchResult(ok=False, error=f"Apprise returned {e.code}: {text[:300]}")
        except (urllib.error.URLError, OSError) as e:
            reason = getattr(e, "reason", e)
            log.warning("apprise unreachable at %s: %s", self.base_url, reason)
            return DispatchResult(ok=False, error=f"Failed to reach Apprise: {reason}")
        except ValueError as e:
            # empty or relative APPRISE_URL
            log.warning("invalid apprise url %r: %s", self.base_url, e)
            return DispatchResult(ok=False, error=f"Failed to reach Apprise: {e}")

    def is_healthy(self) -> bool:
        try:
            with urllib.request.urlopen(self.base_url + "/status", timeout=3) as resp:
                return 200 <= resp.status < 300
        except (urllib.error.URLError, OSError, ValueError):
            return False


def build_mailto_url(smtp_base_url: str, recipient_email: str) -> str:
    """Per-recipient Apprise mailto URL.

    Query-style bases (?user=..&pass=..) get `&to=`; path-style bases get
    the address appended as the last path segment.
    """
    base = smtp_base_url.rstrip("/")
    recipient = urllib.parse.quote(recipient_email, safe="@")
    if "?" in base:
        return f"{base}&to={recipient}"
    return f"{base}/{recipient}"


def get_dispatcher() -> AppriseDispatcher:
    """FastAPI dependency; tests override it with a recording fake."""
    return AppriseDispatcher(settings.APPRISE_URL)
