from .local_change_feed import LocalChangeFeed
from .supabase_realtime_feed import SupabaseRealtimeFeed

__all__ = ["LocalChangeFeed", "SupabaseRealtimeFeed"]
