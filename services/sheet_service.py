# services/sheet_service.py
"""
Sends a copy of each order to the Google Sheet webhook.

The preferred target is a proxy in front of the Apps Script deployment (it
can check an API key and return a real status). When no proxy is configured
the legacy Apps Script URL is called directly.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from domain.models import OrderFormData, OrderLineItem
from settings_store import (
    GOOGLE_SCRIPT_URL,
    PROXY_API_KEY,
    PROXY_URL,
    SettingsStore,
    default_settings_store,
)
from utils.formatting import format_amount

logger = logging.getLogger(__name__)

DEFAULT_GOOGLE_SCRIPT_URL = "https://script.google.com/macros/s/YOUR_GOOGLE_APPS_SCRIPT_ID/exec"
PLACEHOLDER_MARKER = "YOUR_GOOGLE_APPS_SCRIPT"


class SubmissionStatus(Enum):
    DELIVERED = "delivered"
    NOT_CONFIGURED = "not_configured"
    AUTHENTICATION_FAILURE = "authentication_failure"
    AUTHORIZATION_FAILURE = "authorization_failure"
    NOT_FOUND = "not_found"
    HTTP_FAILURE = "http_failure"
    TRANSPORT_FAILURE = "transport_failure"
    FALLBACK_UNVERIFIED = "fallback_unverified"


@dataclass
class SubmissionResult:
    status: SubmissionStatus
    message: str
    status_code: Optional[int] = None

    @property
    def delivered(self) -> bool:
        return self.status is SubmissionStatus.DELIVERED


@dataclass(frozen=True)
class SheetEndpoints:
    target_url: Optional[str]
    direct_url: Optional[str]
    using_proxy: bool
    api_key: Optional[str] = None


def is_usable_url(url: Optional[str]) -> bool:
    return bool(url and url.strip() and PLACEHOLDER_MARKER not in url)


def resolve_endpoints(settings: SettingsStore) -> SheetEndpoints:
    """Proxy first, then the configured Apps Script URL, then the built-in default."""
    proxy_url = settings.get(PROXY_URL) or None
    direct_url = settings.get(GOOGLE_SCRIPT_URL) or DEFAULT_GOOGLE_SCRIPT_URL

    return SheetEndpoints(
        target_url=proxy_url or direct_url,
        direct_url=direct_url,
        using_proxy=bool(proxy_url),
        api_key=settings.get(PROXY_API_KEY) or None,
    )


def build_payload(form: OrderFormData, items: List[OrderLineItem]) -> Dict[str, Any]:
    return {
        "submissionId": str(int(time.time() * 1000)),
        "submissionDate": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        **form.to_dict(),
        "items": [
            {
                "category": i.category,
                "itemName": i.display_name,
                "color": i.color,
                "width": i.width,
                "quantity": i.quantity,
                "uom": i.uom,
                "rate": i.rate,
                "discount": i.discount,
                "deliveryDate": i.delivery_date,
                "remark": i.remark,
                "totalAmount": i.total_amount,
            }
            for i in items
        ],
    }


def build_headers(endpoints: SheetEndpoints) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if endpoints.using_proxy and endpoints.api_key:
        headers["x-api-key"] = endpoints.api_key
    return headers


def describe_http_failure(status_code: int, using_proxy: bool) -> SubmissionResult:
    if status_code == 401:
        if using_proxy:
            msg = (
                "Proxy authentication error (401): invalid or missing API key. "
                "Check that the proxy API key in Settings matches the server config."
            )
        else:
            msg = (
                "Apps Script authorization error (401): the deployment is not publicly accessible. "
                "Use a proxy URL, or set the deployment to 'Who has access: Anyone'."
            )
        return SubmissionResult(SubmissionStatus.AUTHENTICATION_FAILURE, msg, status_code)

    if status_code == 403:
        return SubmissionResult(
            SubmissionStatus.AUTHORIZATION_FAILURE,
            "Forbidden (403): access denied, check the deployment settings.",
            status_code,
        )

    if status_code == 404:
        return SubmissionResult(
            SubmissionStatus.NOT_FOUND,
            "Not found (404): the URL is invalid or the endpoint does not exist.",
            status_code,
        )

    return SubmissionResult(
        SubmissionStatus.HTTP_FAILURE,
        f"Request failed with status {status_code}",
        status_code,
    )


def _response_body(resp: requests.Response) -> Any:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict) and "gasBody" in body:
        return body["gasBody"]
    return body


def _send_unverified(
        session: requests.Session,
        url: str,
        payload: Dict[str, Any],
        timeout: Optional[float],
) -> None:
    """
    POST without looking at the response.
    The status of a direct Apps Script call cannot be trusted, so it is never read.
    """
    resp = session.post(
        url,
        json=payload,
        headers={"Content-Type": "application/json"},
        timeout=timeout,
    )
    resp.close()


def submit_order(
        form: OrderFormData,
        items: List[OrderLineItem],
        settings: Optional[SettingsStore] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
) -> SubmissionResult:
    """
    Send the order to the sheet webhook and classify the outcome.

    Only a 2xx answer from the primary target counts as delivered. When the
    proxy cannot be reached, one fallback POST goes to the direct URL, but
    its result is unknowable and it is reported as not delivered.
    """
    settings = settings or default_settings_store()
    # a bare requests call when no session is injected
    session = session or requests
    endpoints = resolve_endpoints(settings)

    if not is_usable_url(endpoints.target_url):
        logger.warning(
            "Google Sheet URL is not configured, order will NOT be sent to Sheets. "
            "Set either the proxy URL or the Google Script URL in Settings."
        )
        return SubmissionResult(SubmissionStatus.NOT_CONFIGURED, "Sheet URL is not configured")

    payload = build_payload(form, items)
    grand_total = sum(i.total_amount for i in items)

    logger.info(
        "Submitting order %s to Google Sheet (%s mode): url=%s..., branch=%s, customer=%s, items=%d, total=%s",
        payload["submissionId"],
        "PROXY" if endpoints.using_proxy else "DIRECT",
        endpoints.target_url[:60],
        form.branch,
        form.customer_name,
        len(items),
        format_amount(grand_total),
    )

    try:
        resp = session.post(
            endpoints.target_url,
            json=payload,
            headers=build_headers(endpoints),
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error("Failed to submit to Google Sheet: %s", e)
        return _fallback(session, endpoints, payload, timeout, e)

    body = _response_body(resp)

    if resp.ok:
        logger.info("Successfully sent to Google Sheet. Response: %s", body)
        return SubmissionResult(SubmissionStatus.DELIVERED, "Sent to Google Sheet", resp.status_code)

    result = describe_http_failure(resp.status_code, endpoints.using_proxy)
    logger.error("%s Response: %s", result.message, body)
    return result


def _fallback(
        session: requests.Session,
        endpoints: SheetEndpoints,
        payload: Dict[str, Any],
        timeout: Optional[float],
        error: Exception,
) -> SubmissionResult:
    can_fall_back = (
        endpoints.using_proxy
        and is_usable_url(endpoints.direct_url)
        and endpoints.direct_url != endpoints.target_url
    )
    if not can_fall_back:
        return SubmissionResult(SubmissionStatus.TRANSPORT_FAILURE, f"Network error: {error}")

    logger.warning("Proxy failed, attempting fallback to the direct Google Script URL...")
    try:
        _send_unverified(session, endpoints.direct_url, payload, timeout)
    except Exception as fallback_error:
        logger.error("Fallback also failed: %s", fallback_error)
        return SubmissionResult(
            SubmissionStatus.TRANSPORT_FAILURE,
            f"Proxy and fallback both failed: {fallback_error}",
        )

    logger.warning("Fallback request sent, success cannot be verified. Data may or may not be saved.")
    return SubmissionResult(
        SubmissionStatus.FALLBACK_UNVERIFIED,
        "Proxy unreachable; fallback request sent but not verified",
    )


def submit_order_to_sheet(
        form: OrderFormData,
        items: List[OrderLineItem],
        settings: Optional[SettingsStore] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
) -> bool:
    """True only when the webhook confirmed the order."""
    return submit_order(form, items, settings, session=session, timeout=timeout).delivered
