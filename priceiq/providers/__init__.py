"""
Provider Registry

Maps provider ids to their fee models. Adding a provider means adding one
module and one entry here.
"""

from .adyen import AdyenFeeModel
from .base import FeeModel, ProviderProduct, ProviderRate, TableFeeModel
from .checkoutcom import CheckoutComFeeModel
from .custom import CustomFeeModel
from .paypal import PayPalFeeModel
from .stripe import StripeFeeModel

DEFAULT_PROVIDER_ID = "stripe"

PROVIDERS: dict[str, FeeModel] = {
    "stripe": StripeFeeModel(),
    "paypal": PayPalFeeModel(),
    "adyen": AdyenFeeModel(),
    "checkoutcom": CheckoutComFeeModel(),
    "custom": CustomFeeModel(),
}


def get_provider(provider_id: str) -> FeeModel:
    """Return the fee model for `provider_id`; unknown ids get the default provider."""
    return PROVIDERS.get(provider_id) or PROVIDERS[DEFAULT_PROVIDER_ID]


def is_known_provider(provider_id: str) -> bool:
    return provider_id in PROVIDERS


def list_providers() -> list[FeeModel]:
    return list(PROVIDERS.values())


__all__ = [
    "DEFAULT_PROVIDER_ID",
    "PROVIDERS",
    "FeeModel",
    "TableFeeModel",
    "ProviderProduct",
    "ProviderRate",
    "StripeFeeModel",
    "PayPalFeeModel",
    "AdyenFeeModel",
    "CheckoutComFeeModel",
    "CustomFeeModel",
    "get_provider",
    "is_known_provider",
    "list_providers",
]
