from geekhub.models.media import EntryStatus, MediaType, Provider, StatsScope, StatsType, provider_for_type

__all__ = [
    "EntryStatus",
    "MediaType",
    "Provider",
    "StatsScope",
    "StatsType",
    "provider_for_type",
]
