"""
Currencies, account types and the payment-method catalog.

The catalog is the only authority for routing a payment part into a balance
bucket: every method is bound to exactly one currency and one account type.
"""

import enum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from serendipia.errors import CatalogError


class Currency(str, enum.Enum):
    """Supported currencies."""
    BS = "Bs."
    USD = "USD"


class AccountType(str, enum.Enum):
    """Balance bucket within a currency."""
    cash = "cash"
    bank = "bank"
    digital = "digital"


class PaymentMethod(str, enum.Enum):
    """Payment rails."""
    PAGO_MOVIL_BS = "PAGO_MOVIL_BS"
    EFECTIVO_BS = "EFECTIVO_BS"
    EFECTIVO_USD = "EFECTIVO_USD"
    USDT = "USDT"


@dataclass(frozen=True)
class PaymentMethodOption:
    id: PaymentMethod
    label: str
    currency: Currency
    account_type: AccountType


class PaymentMethodCatalog:
    """Validated, read-only lookup of payment methods."""

    def __init__(self, options: Iterable[PaymentMethodOption]):
        self._options: Tuple[PaymentMethodOption, ...] = tuple(options)
        self._by_id: Dict[str, PaymentMethodOption] = {
            option.id.value: option for option in self._options
        }

    def __iter__(self):
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def get(self, method) -> Optional[PaymentMethodOption]:
        """Look up a method by enum member or raw id; unknown ids give None."""
        if method is None:
            return None
        key = method.value if isinstance(method, enum.Enum) else str(method)
        return self._by_id.get(key)

    def methods_for(self, currency: Currency) -> List[PaymentMethodOption]:
        return [option for option in self._options if option.currency == currency]

    def account_types_for(self, currency: Currency) -> List[AccountType]:
        seen: List[AccountType] = []
        for option in self.methods_for(currency):
            if option.account_type not in seen:
                seen.append(option.account_type)
        return seen

    def cash_method_for(self, currency: Currency) -> PaymentMethod:
        """Default method for a currency: its cash rail, else its first method."""
        methods = self.methods_for(currency)
        for option in methods:
            if option.account_type == AccountType.cash:
                return option.id
        return methods[0].id


def build_catalog(options: Iterable[PaymentMethodOption]) -> PaymentMethodCatalog:
    """
    Validate catalog entries and build the lookup.

    Raises CatalogError for an empty catalog, duplicate ids, entries that are
    not PaymentMethodOption, or currencies/account types outside the enums.
    """
    options = list(options)
    if not options:
        raise CatalogError("Payment-method catalog is empty")

    seen = set()
    for option in options:
        if not isinstance(option, PaymentMethodOption):
            raise CatalogError(f"Invalid catalog entry: {option!r}")
        if not isinstance(option.id, PaymentMethod):
            raise CatalogError(f"Unknown payment method id: {option.id!r}")
        if not isinstance(option.currency, Currency):
            raise CatalogError(f"Unknown currency for {option.id.value}: {option.currency!r}")
        if not isinstance(option.account_type, AccountType):
            raise CatalogError(f"Unknown account type for {option.id.value}: {option.account_type!r}")
        if option.id in seen:
            raise CatalogError(f"Duplicate payment method: {option.id.value}")
        seen.add(option.id)

    catalog = PaymentMethodCatalog(options)
    for currency in Currency:
        if not catalog.methods_for(currency):
            raise CatalogError(f"No payment methods for currency {currency.value}")
    return catalog


DEFAULT_CATALOG = build_catalog([
    PaymentMethodOption(PaymentMethod.PAGO_MOVIL_BS, "Pago Móvil (Bs.)", Currency.BS, AccountType.bank),
    PaymentMethodOption(PaymentMethod.EFECTIVO_BS, "Efectivo (Bs.)", Currency.BS, AccountType.cash),
    PaymentMethodOption(PaymentMethod.EFECTIVO_USD, "Efectivo (USD)", Currency.USD, AccountType.cash),
    PaymentMethodOption(PaymentMethod.USDT, "USDT (Digital USD)", Currency.USD, AccountType.digital),
])
