"""Stock clamping rule shared by the local cart and the remote fakes.

Requesting more units than exist is clamped silently; the rule never raises.
"""

from cart_reconciler.core.domain.cart import Reconciliation, Remove, SetQuantity


def candidate_quantity(desired_quantity: int, current_stored_quantity: int, is_increment: bool) -> int:
    """Quantity the caller asked for before stock is considered."""
    if is_increment:
        return current_stored_quantity + desired_quantity
    return desired_quantity


def reconcile(
    desired_quantity: int,
    current_stored_quantity: int,
    available_stock: int,
    is_increment: bool,
) -> Reconciliation:
    candidate = candidate_quantity(desired_quantity, current_stored_quantity, is_increment)
    final = min(candidate, max(available_stock, 0))
    if final <= 0:
        return Remove()
    return SetQuantity(final)
