from cart_reconciler.infrastructure.storage.in_memory_cart_storage import InMemoryCartStorage
from cart_reconciler.infrastructure.storage.json_file_cart_storage import JsonFileCartStorage

__all__ = ["InMemoryCartStorage", "JsonFileCartStorage"]
