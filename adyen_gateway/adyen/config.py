"""Per-configuration Adyen gateway settings"""

from dataclasses import dataclass

from adyen_gateway.config import Settings
from adyen_gateway.domain.models import Modes


@dataclass(frozen=True)
class GatewayConfig:
    """Explicit configuration for one Adyen gateway; no global fallbacks"""

    config_id: int
    merchant_account: str
    api_key: str = ""
    mode: str = Modes.TEST
    live_url_prefix: str = ""
    api_version: str = "v41"
    origin_url: str = "http://localhost:8000"
    rest_namespace: str = "adyen/v1"
    default_locale: str = "en_US"
    default_country: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayConfig":
        return cls(
            config_id=settings.gateway_config_id,
            merchant_account=settings.adyen_merchant_account,
            api_key=settings.adyen_api_key,
            mode=settings.adyen_mode,
            live_url_prefix=settings.adyen_live_url_prefix,
            api_version=settings.adyen_api_version,
            origin_url=settings.origin_url,
            rest_namespace=settings.rest_namespace,
            default_locale=settings.default_locale,
            default_country=settings.default_country,
        )

    @property
    def api_base_url(self) -> str:
        """
        Checkout API endpoint for the mode.

        https://docs.adyen.com/developers/development-resources/live-endpoints
        """
        if self.mode == Modes.LIVE:
            return f"https://{self.live_url_prefix}-checkout-live.adyenpayments.com/checkout/{self.api_version}"

        return f"https://checkout-test.adyen.com/{self.api_version}"
