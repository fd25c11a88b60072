from stockwatch.core.constants import STATUS_CRITICAL, STATUS_GOOD, STATUS_LOW

_SEVERITY = {
    STATUS_GOOD: 0,
    STATUS_LOW: 1,
    STATUS_CRITICAL: 2,
}


def classify(quantity: int, threshold: int) -> str:
    if quantity < 0 or threshold < 0:
        raise ValueError("quantity and threshold must be non-negative")
    if quantity == 0:
        return STATUS_CRITICAL
    if quantity <= threshold:
        return STATUS_LOW
    return STATUS_GOOD


def needs_restock(quantity: int, threshold: int) -> bool:
    """True for both Low and Critical stock.

    ``classify`` keeps Low and Critical apart, but the low-stock listing and
    the SMS trigger both work off this wider predicate.
    """
    return quantity <= threshold


def severity_rank(status: str) -> int:
    try:
        return _SEVERITY[status]
    except KeyError:
        raise ValueError("Unknown stock status: {}".format(status)) from None


def is_escalation(previous_status: str, current_status: str) -> bool:
    return severity_rank(current_status) > severity_rank(previous_status)
