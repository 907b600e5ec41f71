"""
Ladder Resolver

Computes the resolved revision and its "at least" prefix from normalized
signals. This is the classifier's decision logic.

Resolution order:
    1. No family                      -> unknown
    2. Dialect with a fixed revision  -> that revision (ladder bypassed)
    3. No base indicator              -> unknown
    4. No version token               -> family floor
    5. Version token                  -> newest revision it reaches
                                         (floor if it reaches none)

Every snapshot yields a result. "unknown" with an empty prefix stands in
for "cannot determine"; only an invalid family raises.
"""

import logging
from typing import Optional

from stdladder.ladders import Ladder, get_ladder
from stdladder.model import (
    ClassificationResult,
    Dialect,
    LanguageFamily,
    NormalizedSignals,
    ResolutionSource,
    Revision,
    SignalSnapshot,
)
from stdladder.normalizer import normalize
from stdladder.quirks import DEFAULT_TABLE, QuirksTable

logger = logging.getLogger(__name__)


def _result(
    signals: NormalizedSignals,
    ladder: Ladder,
    revision: Revision,
    source: ResolutionSource,
    dialect: Optional[Dialect],
) -> ClassificationResult:
    return ClassificationResult(
        family=signals.family,
        resolved=revision,
        at_least=ladder.prefix(revision),
        dialects=frozenset([dialect.name]) if dialect is not None else frozenset(),
        excluded_capabilities=dialect.excludes if dialect is not None else frozenset(),
        source=source,
        applied_quirk=signals.applied_quirk,
    )


def _unknown(signals: NormalizedSignals, dialect: Optional[Dialect] = None) -> ClassificationResult:
    return ClassificationResult(
        family=signals.family,
        dialects=frozenset([dialect.name]) if dialect is not None else frozenset(),
        excluded_capabilities=dialect.excludes if dialect is not None else frozenset(),
        source=ResolutionSource.UNKNOWN,
        applied_quirk=signals.applied_quirk,
    )


def resolve(signals: NormalizedSignals, table: QuirksTable = DEFAULT_TABLE) -> ClassificationResult:
    """
    Resolve normalized signals against the family's ladder.

    Args:
        signals: Output of normalize()
        table: Quirks table consulted for dialect recognitions

    Returns:
        ClassificationResult
    """
    ladder = get_ladder(signals.family)
    if ladder is None:
        return _unknown(signals)

    dialect = table.select_dialect(signals.dialect_flags, signals.family)
    if dialect is not None and dialect.revision is not None:
        logger.debug("Dialect %s fixes %s to %s", dialect.name, signals.family.value, dialect.revision)
        return _result(signals, ladder, ladder.get(dialect.revision), ResolutionSource.DIALECT, dialect)

    if ladder.base_flag not in signals.presence_flags:
        logger.debug("No %s indicator; %s standard unknown", ladder.base_flag, signals.family.value)
        return _unknown(signals, dialect)

    if signals.version_token is None:
        return _result(signals, ladder, ladder.floor, ResolutionSource.FLOOR, dialect)

    revision = ladder.scan(signals.version_token, signals.presence_flags)
    if revision is None:
        logger.debug(
            "Version token %s below every %s threshold; using floor %s",
            signals.version_token, signals.family.value, ladder.floor.name,
        )
        return _result(signals, ladder, ladder.floor, ResolutionSource.FLOOR, dialect)

    return _result(signals, ladder, revision, ResolutionSource.TOKEN, dialect)


def classify(
    snapshot: SignalSnapshot,
    language_family=None,
    table: Optional[QuirksTable] = None,
) -> ClassificationResult:
    """
    Classify a signal snapshot.

    This is the single entry point of the classifier.

    Args:
        snapshot: Signals reported by the toolchain
        language_family: LanguageFamily (or "C", "CPP", "C++", "none") to
            classify as; defaults to snapshot.language_family
        table: Quirks table; defaults to DEFAULT_TABLE

    Returns:
        ClassificationResult

    Raises:
        InvalidLanguageFamily: If language_family is not a valid family
    """
    if language_family is None:
        family = snapshot.language_family
    else:
        family = LanguageFamily.coerce(language_family)
    if table is None:
        table = DEFAULT_TABLE

    signals = normalize(snapshot, table, family=family)
    result = resolve(signals, table)
    logger.debug("Classified %s snapshot as %s (%s)", family.value, result.resolved_name, result.source.value)
    return result
