"""ARES client — Czech business registry lookups by IČO.

When the registry cannot be reached a small set of well-known companies is
served from memory so forms can still be prefilled.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx

from shift_manager.ares.schemas import CompanyInfo
from shift_manager.common.exceptions import (
    BadRequestException,
    NotFoundException,
    UpstreamException,
)
from shift_manager.config import settings

logger = logging.getLogger(__name__)

ICO_PATTERN = re.compile(r"^\d{8}$")

INVALID_ICO = "IČO musí obsahovat přesně 8 číslic."
COMPANY_NOT_FOUND = "Firma s tímto IČO nebyla nalezena."
ARES_UNAVAILABLE = "Nelze kontaktovat ARES API. Zadejte údaje ručně."

DEMO_COMPANIES: dict[str, dict[str, Optional[str]]] = {
    "04917871": {
        "name": "Insion s.r.o.",
        "dic": "CZ04917871",
        "address": "Na hřebenech II 1718/8, Nusle, 140 00 Praha 4",
    },
    "27082440": {
        "name": "Seznam.cz, a.s.",
        "dic": "CZ27082440",
        "address": "Radlická 3294/10, Smíchov, 150 00 Praha 5",
    },
    "45317054": {
        "name": "ŠKODA AUTO a.s.",
        "dic": "CZ45317054",
        "address": "tř. Václava Klementa 869, Mladá Boleslav II, 293 01 Mladá Boleslav",
    },
    "26168685": {
        "name": "Prague City Tourism a.s.",
        "dic": "CZ26168685",
        "address": "Arbesovo náměstí 70/4, Smíchov, 150 00 Praha 5",
    },
    "00006947": {
        "name": "Česká národní banka",
        "dic": None,
        "address": "Na příkopě 864/28, Nové Město, 110 00 Praha 1",
    },
}


def _to_company(ico: str, data: dict[str, Any]) -> CompanyInfo:
    sidlo = data.get("sidlo") or {}
    return CompanyInfo(
        name=data.get("obchodniJmeno") or "",
        ico=data.get("ico") or ico,
        dic=data.get("dic"),
        address=sidlo.get("textovaAdresa") or "",
    )


def _demo_company(ico: str) -> CompanyInfo:
    demo = DEMO_COMPANIES.get(ico)
    if demo is None:
        raise UpstreamException(ARES_UNAVAILABLE)
    logger.warning("ARES unreachable, serving built-in record for %s", ico)
    return CompanyInfo(ico=ico, **demo)


async def lookup_company(
    ico: Optional[str],
    client: Optional[httpx.AsyncClient] = None,
) -> CompanyInfo:
    """Return registry details for *ico*."""
    ico = (ico or "").strip()
    if not ICO_PATTERN.match(ico):
        raise BadRequestException(INVALID_ICO)

    url = f"{settings.ARES_BASE_URL}/ekonomicke-subjekty/{ico}"
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.ARES_TIMEOUT_SECONDS) as own_client:
                resp = await own_client.get(url, headers={"Accept": "application/json"})
        else:
            resp = await client.get(url, headers={"Accept": "application/json"})
    except httpx.HTTPError as exc:
        logger.warning("ARES request for %s failed: %s", ico, exc)
        return _demo_company(ico)

    if resp.status_code == 404:
        raise NotFoundException("Company", detail=COMPANY_NOT_FOUND)
    if resp.status_code != 200:
        logger.warning("ARES returned HTTP %s for %s", resp.status_code, ico)
        return _demo_company(ico)

    try:
        data = resp.json()
    except ValueError:
        logger.warning("ARES returned a non-JSON body for %s", ico)
        return _demo_company(ico)
    if not data.get("obchodniJmeno"):
        raise NotFoundException("Company", detail=COMPANY_NOT_FOUND)
    return _to_company(ico, data)
