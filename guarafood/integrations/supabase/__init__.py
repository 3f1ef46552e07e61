from .client import SupabaseClient, SupabaseError

__all__ = ["SupabaseClient", "SupabaseError"]
