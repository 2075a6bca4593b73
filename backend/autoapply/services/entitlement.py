"""
Entitlement Service - premium subscription lookup and checkout via Stripe

Used only by the billing endpoints to gate premium affordances in the
frontend. The application lifecycle and scoring never consult it.

Flow:
    check_entitlement: customer by email -> active subscription? -> Entitlement
    create_checkout:   reuse customer if any -> monthly subscription session URL
"""

import logging
from typing import Any, Dict, Optional

import httpx

from autoapply.config import get_settings
from autoapply.errors import EntitlementError
from autoapply.schemas import CurrentUser, Entitlement

logger = logging.getLogger(__name__)


class EntitlementService:
    def __init__(
        self,
        secret_key: Optional[str] = None,
        api_base: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key if secret_key is not None else settings.stripe_secret_key
        self.api_base = (api_base or settings.stripe_api_base).rstrip("/")
        self.client = client
        self.settings = settings

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.api_base}{path}"
        try:
            if self.client is not None:
                response = await self.client.request(method, url, auth=(self.secret_key, ""), **kwargs)
            else:
                async with httpx.AsyncClient(timeout=30.0) as client:
                    response = await client.request(method, url, auth=(self.secret_key, ""), **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Stripe API error on {method} {path}: {e}")
            raise EntitlementError("Payment provider request failed") from e

    async def _find_customer_id(self, email: str) -> Optional[str]:
        data = await self._request("GET", "/customers", params={"email": email, "limit": 1})
        customers = data.get("data", [])
        return customers[0]["id"] if customers else None

    async def check_entitlement(self, user: CurrentUser) -> Entitlement:
        """
        Whether the user holds an active premium subscription.

        Raises:
            EntitlementError: Stripe unreachable or rejected the request
        """
        customer_id = await self._find_customer_id(user.email)
        if customer_id is None:
            logger.info(f"No Stripe customer for {user.email}")
            return Entitlement(subscribed=False)

        data = await self._request(
            "GET",
            "/subscriptions",
            params={"customer": customer_id, "status": "active", "limit": 1},
        )
        subscriptions = data.get("data", [])
        if not subscriptions:
            return Entitlement(subscribed=False)

        subscription = subscriptions[0]
        return Entitlement(
            subscribed=True,
            subscription_id=subscription.get("id"),
            status=subscription.get("status"),
            current_period_end=subscription.get("current_period_end"),
        )

    async def create_checkout(self, user: CurrentUser, origin: Optional[str] = None) -> str:
        """Create a monthly subscription checkout session and return its URL."""
        origin = (origin or self.settings.frontend_origin).rstrip("/")
        customer_id = await self._find_customer_id(user.email)

        form = {
            "mode": "subscription",
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": self.settings.premium_currency,
            "line_items[0][price_data][unit_amount]": str(self.settings.premium_price_cents),
            "line_items[0][price_data][recurring][interval]": "month",
            "line_items[0][price_data][product_data][name]": self.settings.premium_product_name,
            "success_url": f"{origin}/premium?success=true",
            "cancel_url": f"{origin}/premium?canceled=true",
            "allow_promotion_codes": "true",
            "billing_address_collection": "auto",
            "metadata[user_id]": user.id,
        }
        if customer_id:
            form["customer"] = customer_id
        else:
            form["customer_email"] = user.email

        session = await self._request("POST", "/checkout/sessions", data=form)
        logger.info(f"Checkout session {session.get('id')} created for {user.id}")
        return session["url"]
