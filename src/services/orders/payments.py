from typing import Iterable, Optional
from urllib.parse import quote

from src.common.logger import log_info
from src.common.constants import TypeMsg
from src.shared.models.enums import PaymentProvider
from src.shared.models.order_dto import PaymentRedirectDTO
from src.shared.errors import NotFoundError, ServiceUnavailableError, ValidationError


class PaymentGateway:
    """
    Builds checkout redirects for external payment providers.

    No money moves here: the provider's hosted checkout owns the payment,
    and its webhook is only acknowledged.
    """

    def __init__(
        self,
        enabled: bool,
        redirect_base: str,
        providers: Optional[Iterable[str]] = None,
    ):
        self.enabled = enabled
        self.redirect_base = redirect_base.rstrip("/")
        known = frozenset(p.value for p in PaymentProvider)
        # Config can only narrow the fixed provider set, never extend it
        self.providers = known if providers is None else known.intersection(providers)

    def initiate(self, provider: Optional[str], order_id: Optional[int]) -> PaymentRedirectDTO:
        if not self.enabled:
            raise ServiceUnavailableError("Payments disabled")
        if not provider or not order_id:
            raise ValidationError("provider and order_id required")

        if provider not in self.providers:
            raise ValidationError("Unsupported provider")

        redirect_url = f"{self.redirect_base}/{quote(provider)}/checkout?order={order_id}"
        return PaymentRedirectDTO(provider=provider, order_id=order_id, redirectUrl=redirect_url)

    async def acknowledge_webhook(self, provider: str, payload: bytes) -> dict:
        """Accepts a provider callback. Signature checks belong to the provider integration."""
        if provider not in self.providers:
            raise NotFoundError("Unknown provider")

        await log_info(
            f"Webhook from {provider} received ({len(payload)} bytes)",
            type_msg=TypeMsg.INFO,
        )
        return {"received": True}
