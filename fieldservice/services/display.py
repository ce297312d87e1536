"""Display-time derived values. Nothing computed here is ever persisted."""
from typing import Optional

from fieldservice.core.config import settings
from fieldservice.models.client import Client, ClientType

_COMPANY_NAMED_TYPES = {ClientType.COMPANY.value, ClientType.CUSTOMER_SERVICE.value}


def client_display_name(client: Client) -> Optional[str]:
    if client.client_type in _COMPANY_NAMED_TYPES:
        return client.company_name
    return client.contact_name


def with_vat(amount: Optional[float], rate: Optional[float] = None) -> Optional[float]:
    """VAT-inclusive figure rounded to 2 decimals (e.g. 250 -> 295.0 at 18%)."""
    if amount is None:
        return None
    if rate is None:
        rate = settings.VAT_RATE
    return round(float(amount) * (1 + rate), 2)


def format_money(amount: Optional[float]) -> str:
    return f"{float(amount or 0):.2f}"
