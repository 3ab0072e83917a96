# petspa/pricing.py

from typing import Iterable

from petspa.data import BATH_PRICES, EXTRA_PRICES, SIZE_MULTIPLIER


class PricingError(ValueError):
    pass


def calculate_price(service: str, pet_size: str, extras: Iterable[str] = ()) -> float:
    if service not in BATH_PRICES:
        raise PricingError(f"Unknown bath type: {service}")
    if pet_size not in SIZE_MULTIPLIER:
        raise PricingError(f"Unknown pet size: {pet_size}")

    total = BATH_PRICES[service] * SIZE_MULTIPLIER[pet_size]
    for extra in set(extras):
        if extra not in EXTRA_PRICES:
            raise PricingError(f"Unknown extra: {extra}")
        total += EXTRA_PRICES[extra]
    return round(total, 2)
