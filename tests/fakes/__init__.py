from .analytics_store import FakeAnalyticsStore, FakeSet

__all__ = ["FakeAnalyticsStore", "FakeSet"]
