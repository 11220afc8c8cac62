from __future__ import annotations

import functools
from typing import Optional

import pycountry


@functools.cache
def official_name(country_code: str) -> Optional[str]:
    """Converts an ISO 3166-1 alpha-2 code into the country's official name.

    Countries without an official name fall back to their common one.
    """

    if not country_code:
        return None

    country = pycountry.countries.get(alpha_2=country_code.upper())
    if country is None:
        return None

    return getattr(country, "official_name", country.name)
