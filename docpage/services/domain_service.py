"""Domain availability lookup against the Registro.br RDAP service"""
import logging
import re
import time
from typing import Optional

import httpx

from docpage.core.config import settings
from docpage.errors.exceptions import BadRequestException
from docpage.schemas.domain_schemas import DomainAvailability
from docpage.utils import http
from docpage.utils.logger import log_upstream_call

logger = logging.getLogger(__name__)

LABEL_PATTERN = re.compile(r"[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?")
MIN_LABEL_LENGTH = 2
MAX_LABEL_LENGTH = 63

RDAP_HEADERS = {
    "Accept": "application/rdap+json",
    "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
    "Cache-Control": "no-cache",
}

MSG_AVAILABLE = "Domain available for registration!"
MSG_PROBABLY_AVAILABLE = "Domain probably available! Confirm at Registro.br"
MSG_TAKEN = "This domain is already registered. Please choose another name."
MSG_INVALID_FORMAT = "Invalid domain format. Use only letters, numbers and hyphens."
MSG_INVALID_LENGTH = "Domain must be between 2 and 63 characters."
MSG_LOOKUP_ERROR = "Error checking availability. Please try again."


class DomainLookupError(Exception):
    """The registry could not be reached or answered with garbage"""


def validate_label(label: str) -> Optional[str]:
    """Return an error message, or None when *label* is acceptable"""
    if not LABEL_PATTERN.fullmatch(label):
        return MSG_INVALID_FORMAT
    if not MIN_LABEL_LENGTH <= len(label) <= MAX_LABEL_LENGTH:
        return MSG_INVALID_LENGTH
    return None


async def _dns_resolves(client: httpx.AsyncClient, full_domain: str) -> bool:
    """
    True when the public resolver returns at least one A record. A failed
    lookup counts as "does not resolve".
    """
    try:
        response = await client.get(settings.DNS_RESOLVER_URL, params={"name": full_domain, "type": "A"})
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"DNS fallback failed for {full_domain}, assuming available: {str(e)}")
        return False
    return bool(isinstance(data, dict) and data.get("Answer"))


async def check_domain_availability(domain: Optional[str]) -> DomainAvailability:
    """
    Classify ``<domain>.com.br``:

    | RDAP answer             | result                        |
    |-------------------------|-------------------------------|
    | 404                     | available                     |
    | 2xx                     | taken                         |
    | 403 + DNS resolves      | taken                         |
    | 403 + no DNS / DNS fail | available (probable)          |
    | anything else           | unavailable, generic error    |

    Network or parse failures raise DomainLookupError.
    """
    if not domain:
        raise BadRequestException(detail="Domain is required")

    label = domain.strip().lower()
    error = validate_label(label)
    if error:
        return DomainAvailability(available=False, error=error)

    full_domain = f"{label}{settings.DOMAIN_SUFFIX}"
    url = f"{settings.RDAP_BASE_URL.rstrip('/')}/{full_domain}"
    logger.info(f"Checking domain via RDAP: {full_domain}")

    try:
        async with http.get_http_client() as client:
            started = time.monotonic()
            response = await client.get(url, headers=RDAP_HEADERS)
            log_upstream_call("RDAP", response.status_code, time.monotonic() - started, full_domain)

            if response.status_code == 404:
                return DomainAvailability(
                    available=True, domain=label, fullDomain=full_domain, message=MSG_AVAILABLE,
                )

            if response.is_success:
                data = response.json()
                handle = (data.get("handle") or data.get("ldhName")) if isinstance(data, dict) else None
                logger.info(f"{full_domain} is registered: {handle}")
                return DomainAvailability(
                    available=False, domain=label, fullDomain=full_domain, error=MSG_TAKEN,
                )

            if response.status_code == 403:
                if await _dns_resolves(client, full_domain):
                    return DomainAvailability(
                        available=False, domain=label, fullDomain=full_domain, error=MSG_TAKEN,
                    )
                return DomainAvailability(
                    available=True,
                    domain=label,
                    fullDomain=full_domain,
                    message=MSG_PROBABLY_AVAILABLE,
                    probable=True,
                )
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"RDAP lookup failed for {full_domain}: {str(e)}")
        raise DomainLookupError(str(e)) from e

    logger.error(f"RDAP returned unexpected status {response.status_code} for {full_domain}")
    return DomainAvailability(available=False, error=MSG_LOOKUP_ERROR)
