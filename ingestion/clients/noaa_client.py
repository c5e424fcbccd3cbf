"""
Client for NOAA CPC plain-text index files.

- Arctic Oscillation: dernière valeur de la série journalière (ao.sprd2.txt).
- ENSO: dernière valeur ONI de la table oni.ascii.txt, discrétisée en phase.
- Les fichiers CPC sont lus via le proxy r.jina.ai qui renvoie le texte brut.

Les erreurs réseau remontent à l'appelant ; un statut HTTP en erreur, un contenu
vide ou illisible se dégradent en 0.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Optional

import requests

from ingestion.transform.indices import enso_phase

logger = logging.getLogger(__name__)

AO_DAILY_URL = "https://www.cpc.ncep.noaa.gov/products/precip/CWlink/daily_ao_index/ao.sprd2.txt"
ONI_TABLE_URL = "https://www.cpc.ncep.noaa.gov/data/indices/oni.ascii.txt"
TEXT_PROXY = "https://r.jina.ai/http://"

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_HAS_DIGIT = re.compile(r"\d")


def proxied(url: str) -> str:
    """Route ``url`` through the text-extraction proxy."""
    return TEXT_PROXY + re.sub(r"^https?://", "", url)


def parse_leading_float(token: str) -> float:
    """Parse the numeric prefix of ``token`` (``"3.25*"`` -> 3.25); NaN if none."""
    match = _FLOAT_PREFIX.match(token.strip())
    if not match:
        return math.nan
    return float(match.group(0))


def last_token_value(text: str, keep: Optional[Callable[[str], bool]] = None) -> float:
    """Return the last whitespace-separated token of the last kept line.

    Blank lines are always dropped; ``keep`` filters the remaining
    lines further.  Returns NaN if no line survives or the token is not
    numeric.
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if keep is not None:
        lines = [line for line in lines if keep(line)]
    if not lines:
        return math.nan
    return parse_leading_float(lines[-1].split()[-1])


class NoaaClient:
    """Client to fetch the AO index and ENSO phase from NOAA CPC text files."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def _fetch_text(self, url: str) -> str:
        target = proxied(url)
        logger.info("Fetching %s", target)
        resp = self.session.get(target, timeout=self.timeout)
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            logger.warning("Text source %s returned an error status: %s", target, exc)
            return ""
        return resp.text

    def fetch_ao_index(self) -> float:
        """Most recent daily AO value, or 0.0 if the file yields nothing usable."""
        value = last_token_value(self._fetch_text(AO_DAILY_URL))
        if not math.isfinite(value):
            logger.warning("No usable AO value in %s, defaulting to 0", AO_DAILY_URL)
            return 0.0
        return value

    def fetch_enso_phase(self) -> int:
        """ENSO phase (-1, 0, 1) from the latest ONI value."""
        oni = last_token_value(
            self._fetch_text(ONI_TABLE_URL),
            keep=lambda line: bool(_HAS_DIGIT.search(line)),
        )
        if math.isnan(oni):
            logger.warning("No usable ONI value in %s, phase set to neutral", ONI_TABLE_URL)
        phase = enso_phase(oni)
        logger.info("ONI=%s -> ENSO phase %d", oni, phase)
        return phase


__all__ = ["NoaaClient", "last_token_value", "parse_leading_float", "proxied"]
