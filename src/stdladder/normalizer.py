"""
Signal Normalizer

Turns a raw SignalSnapshot into NormalizedSignals, rewriting vendor
irregularities to their standard equivalents so the ladder only ever
sees standard token values.

Pure transformation. Never fails: unrecognized vendors skip rewriting.
"""

import logging
from typing import Optional

from stdladder.model import LanguageFamily, NormalizedSignals, SignalSnapshot
from stdladder.quirks import DEFAULT_TABLE, QuirksTable

logger = logging.getLogger(__name__)


def normalize(
    snapshot: SignalSnapshot,
    table: QuirksTable = DEFAULT_TABLE,
    family: Optional[LanguageFamily] = None,
) -> NormalizedSignals:
    """
    Apply vendor quirks to a snapshot.

    Args:
        snapshot: Raw signals
        table: Quirks table to consult
        family: Family to classify as; defaults to the snapshot's own

    Returns:
        NormalizedSignals
    """
    family = snapshot.language_family if family is None else family
    raw = snapshot.version_token
    token = raw
    applied = None

    quirk = table.vendor_quirk(snapshot.vendor_id, family)
    if quirk is not None:
        token = quirk.rewrite(raw)
        if token != raw:
            applied = quirk.vendor_id
            logger.debug("Vendor %s: rewrote version token %s -> %s", quirk.vendor_id, raw, token)

    return NormalizedSignals(
        family=family,
        presence_flags=snapshot.presence_flags,
        version_token=token,
        raw_version_token=raw,
        dialect_flags=snapshot.dialect_flags,
        vendor_id=snapshot.vendor_id,
        applied_quirk=applied,
    )
