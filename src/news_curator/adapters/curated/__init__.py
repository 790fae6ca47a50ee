"""Curated source lookups."""

from news_curator.adapters.curated.supabase_sources import SupabaseSourceProvider, map_to_internal_role

__all__ = ["SupabaseSourceProvider", "map_to_internal_role"]
