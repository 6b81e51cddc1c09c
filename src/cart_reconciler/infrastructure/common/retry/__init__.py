from cart_reconciler.infrastructure.common.retry.retry_policy import RetryPolicy

__all__ = ["RetryPolicy"]
