# academy/services/checkout.py
"""Hosted checkout: session creation against the payment provider and webhook signatures."""
import hashlib
import hmac
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from academy.core.config import settings

logger = logging.getLogger(__name__)

DEMO_URL = "/dashboard?demo=true"
DEMO_MESSAGE = "Demo mode: payment processing is not configured"


class CheckoutError(Exception):
    """The provider refused or could not be reached."""


@dataclass
class LineItem:
    name: str
    description: str
    unit_amount: int  # minor units (cents)
    quantity: int = 1


@dataclass
class CheckoutSession:
    id: Optional[str]
    url: Optional[str]
    demo: bool = False


@dataclass
class CheckoutProvider(ABC):
    """Opens hosted checkout sessions for one line item."""

    currency: str = "usd"
    demo: bool = field(default=False, init=False)

    @abstractmethod
    def create_session(self, *, item: LineItem, success_url: str, cancel_url: str,
                       metadata: Dict[str, Any], customer_email: Optional[str] = None) -> CheckoutSession:
        ...


@dataclass
class DemoCheckoutProvider(CheckoutProvider):
    demo: bool = field(default=True, init=False)

    def create_session(self, *, item, success_url, cancel_url, metadata, customer_email=None) -> CheckoutSession:
        logger.info("Demo checkout for %s (%s cents)", item.name, item.unit_amount * item.quantity)
        return CheckoutSession(id=None, url=DEMO_URL, demo=True)


@dataclass
class HostedCheckoutProvider(CheckoutProvider):
    api_url: str = ""
    api_key: str = ""
    timeout: float = 10.0
    transport: Optional[httpx.BaseTransport] = None

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.api_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self.transport,
        )

    def create_session(self, *, item, success_url, cancel_url, metadata, customer_email=None) -> CheckoutSession:
        payload = {
            "mode": "payment",
            "currency": self.currency,
            "lineItems": [{
                "name": item.name,
                "description": item.description,
                "unitAmount": item.unit_amount,
                "quantity": item.quantity,
            }],
            "successUrl": success_url,
            "cancelUrl": cancel_url,
            "metadata": {k: str(v) for k, v in metadata.items()},
        }
        if customer_email:
            payload["customerEmail"] = customer_email
        try:
            with self._client() as client:
                response = client.post("/checkout/sessions", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Checkout provider answered %s: %s", e.response.status_code, e.response.text[:200])
            raise CheckoutError(f"Checkout provider returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Checkout provider unreachable: %s", e)
            raise CheckoutError("Checkout provider unavailable") from e

        session = CheckoutSession(id=data.get("id"), url=data.get("url"))
        if not session.id and not session.url:
            raise CheckoutError("Checkout provider returned neither a session id nor a URL")
        logger.info("Created checkout session %s", session.id)
        return session


def get_checkout_provider() -> CheckoutProvider:
    """FastAPI dependency; tests override it."""
    if not settings.CHECKOUT_API_KEY or not settings.CHECKOUT_API_URL:
        return DemoCheckoutProvider(currency=settings.CHECKOUT_CURRENCY)
    return HostedCheckoutProvider(
        currency=settings.CHECKOUT_CURRENCY,
        api_url=settings.CHECKOUT_API_URL,
        api_key=settings.CHECKOUT_API_KEY,
        timeout=settings.CHECKOUT_TIMEOUT_SECONDS,
    )


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


def sign_payload(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def verify_signature(body: bytes, signature: Optional[str], secret: str) -> bool:
    if not secret or not signature:
        return False
    # header values are latin-1 text, not necessarily ASCII
    expected = sign_payload(body, secret).encode()
    return hmac.compare_digest(expected, signature.strip().encode("latin-1", "replace"))
