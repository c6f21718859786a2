import logging
from typing import Optional

import httpx

from booking_schemas import InvoiceReference, PaymentEvent
from payments.correlation import build_external_id

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "Event Booking"


class ProviderError(Exception):
    """The payment provider could not be reached or rejected the request."""


class XenditClient:
    """
    Thin client for the Xendit invoice API.

    Auth is HTTP basic with the secret key as username and an empty password.
    Failures are never retried; every error surfaces as ProviderError.
    """

    def __init__(
        self,
        secret_key: str,
        api_url: str = "https://api.xendit.co/v2",
        frontend_url: str = "http://localhost:5173",
        currency: str = "PHP",
        invoice_duration: int = 86400,
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.frontend_url = frontend_url.rstrip("/")
        self.currency = currency
        self.invoice_duration = invoice_duration
        self._http = http_client or httpx.Client(timeout=timeout)
        self._auth = httpx.BasicAuth(secret_key, "")

    @classmethod
    def from_settings(cls, settings, http_client: Optional[httpx.Client] = None) -> "XenditClient":
        return cls(
            secret_key=settings.xendit_secret_key,
            api_url=settings.xendit_api_url,
            frontend_url=settings.frontend_url,
            currency=settings.invoice_currency,
            invoice_duration=settings.invoice_duration,
            timeout=settings.xendit_timeout,
            http_client=http_client,
        )

    def close(self):
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.api_url}{path}"
        try:
            resp = self._http.request(method, url, auth=self._auth, **kwargs)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"{method} {path} returned {exc.response.status_code}: {exc.response.text[:500]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"{method} {path} returned a non-JSON body") from exc
        if not isinstance(body, dict):
            raise ProviderError(f"{method} {path} returned an unexpected body")
        return body

    def create_invoice(
        self,
        booking_id: str,
        amount: float,
        description: Optional[str] = None,
        customer_email: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> InvoiceReference:
        """
        Create a hosted invoice for a booking.
        The returned checkout_url is where the frontend redirects the customer.
        """
        description = description or DEFAULT_DESCRIPTION
        external_id = build_external_id(booking_id)
        payload = {
            "external_id": external_id,
            "amount": amount,
            "description": description,
            "invoice_duration": self.invoice_duration,
            "currency": self.currency,
            "success_redirect_url": f"{self.frontend_url}/payment-status?status=success",
            "failure_redirect_url": f"{self.frontend_url}/payment-status?status=failed",
            "items": [
                {
                    "name": description,
                    "quantity": 1,
                    "price": amount,
                    "category": "Event",
                }
            ],
            "fees": [],
            "metadata": {"booking_id": booking_id},
        }
        # omitted rather than sent as null
        payload["customer"] = {"email": customer_email} if customer_email else {}
        if remarks is not None:
            payload["metadata"]["remarks"] = remarks

        logger.info("Creating invoice", extra={"booking_id": booking_id, "amount": amount})
        data = self._request("POST", "/invoices", json=payload)

        invoice_id = data.get("id")
        checkout_url = data.get("invoice_url")
        if not invoice_id or not checkout_url:
            raise ProviderError("invoice response is missing id or invoice_url")
        return InvoiceReference(
            external_id=data.get("external_id") or external_id,
            invoice_id=invoice_id,
            checkout_url=checkout_url,
        )

    def fetch_invoice_status(self, invoice_id: str) -> PaymentEvent:
        data = self._request("GET", f"/invoices/{invoice_id}")
        if not data.get("status"):
            raise ProviderError("invoice response is missing status")
        return PaymentEvent(
            id=data.get("id") or invoice_id,
            status=data["status"],
            external_id=data.get("external_id"),
            metadata=data.get("metadata") if isinstance(data.get("metadata"), dict) else None,
        )
