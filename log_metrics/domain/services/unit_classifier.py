"""Unit Classifier - guesses a metric's unit from its header text."""
import re

from log_metrics.domain.entities.unit import Unit

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")

# Checked in order, first match wins.
_UNIT_RULES = (
    (("time", "wait"), Unit.MILLISECONDS),
    (("heap",), Unit.BYTES),
    (("kbit/s",), Unit.KILOBITS_PER_SECOND),
    (("/s",), Unit.COUNT_PER_SECOND),
    (("added", "closed"), Unit.COUNT),
)


def normalize_token(token: str) -> str:
    """Lower-case a header token and drop every non-alphanumeric run."""
    return _NON_ALPHANUMERIC.sub("", token.lower())


def classify_unit(token: str) -> Unit:
    """Map a header token to a unit.

    Matching is case-insensitive but keeps punctuation, so throughput
    columns such as "Outbound throughput (kbit/s)" still hit the "/s" rules.
    """
    lowered = token.lower()
    for needles, unit in _UNIT_RULES:
        if any(needle in lowered for needle in needles):
            return unit
    return Unit.NONE
