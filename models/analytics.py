"""Answer-position analytics counter, shared under one fixed key."""
from config.settings import ANALYTICS_KEY
from db.database import kv_get, kv_set, kv_remove
from engine.randomizer import PositionAnalytics


def load():
    return PositionAnalytics.from_dict(kv_get(ANALYTICS_KEY))


def save(analytics):
    kv_set(ANALYTICS_KEY, analytics.to_dict())


def reset():
    kv_remove(ANALYTICS_KEY)
