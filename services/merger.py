from models.transaction import Transaction


def merge(
    real_transactions: list[Transaction],
    forecasted_transactions: list[Transaction],
) -> list[Transaction]:
    """Real transactions plus every forecast no real transaction already covers.

    A forecast is covered when a real transaction shares its
    (recurring_parent_id, date) key. Order is not meaningful; sort for display.
    """
    covered = {
        t.occurrence_key for t in real_transactions
        if t.occurrence_key is not None
    }
    surviving = [
        f for f in forecasted_transactions
        if f.occurrence_key not in covered
    ]
    return [*real_transactions, *surviving]
