import json

import httpx
import pytest

from academy.services.checkout import (
    DEMO_URL, CheckoutError, CheckoutProvider, DemoCheckoutProvider, HostedCheckoutProvider, LineItem,
    sign_payload, to_minor_units, verify_signature,
)

ITEM = LineItem(name="Debate Basics", description="Class enrollment", unit_amount=4999)


def hosted(handler) -> HostedCheckoutProvider:
    return HostedCheckoutProvider(api_url="https://pay.example.com/v1", api_key="sk_test",
                                  transport=httpx.MockTransport(handler))


def create(provider, **kw):
    return provider.create_session(item=ITEM, success_url="http://app.test/ok", cancel_url="http://app.test/no",
                                   metadata={"classId": 3, "paymentId": 9}, **kw)


def test_hosted_session_request():
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers["Authorization"]
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "cs_1", "url": "https://pay.example.com/c/cs_1"})

    session = create(hosted(handler), customer_email="pat@example.com")
    assert (session.id, session.url, session.demo) == ("cs_1", "https://pay.example.com/c/cs_1", False)
    assert seen["auth"] == "Bearer sk_test"
    assert seen["path"] == "/v1/checkout/sessions"
    assert seen["body"]["lineItems"][0]["unitAmount"] == 4999
    assert seen["body"]["metadata"] == {"classId": "3", "paymentId": "9"}
    assert seen["body"]["customerEmail"] == "pat@example.com"


@pytest.mark.parametrize("handler", [
    lambda r: httpx.Response(500, text="boom"),
    lambda r: httpx.Response(200, json={}),
    lambda r: httpx.Response(200, text="not json"),
])
def test_hosted_failures_raise_checkout_error(handler):
    with pytest.raises(CheckoutError):
        create(hosted(handler))


def test_unreachable_provider():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(CheckoutError):
        create(hosted(handler))


def test_demo_provider():
    session = create(DemoCheckoutProvider())
    assert (session.id, session.url, session.demo) == (None, DEMO_URL, True)


def test_minor_units():
    assert to_minor_units(49.99) == 4999
    assert to_minor_units(0.1 + 0.2) == 30


def test_signatures():
    body = b'{"type":"checkout.session.completed"}'
    sig = sign_payload(body, "whsec")
    assert verify_signature(body, sig, "whsec")
    assert not verify_signature(body + b" ", sig, "whsec")
    assert not verify_signature(body, None, "whsec")
    assert not verify_signature(body, sig, "")
    # a latin-1 header value that is not ASCII
    assert not verify_signature(body, "é", "whsec")


def test_provider_base_is_abstract():
    with pytest.raises(TypeError):
        CheckoutProvider()
