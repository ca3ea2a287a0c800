# /studio-backend/app/services/class_helpers/ordering.py

"""Sort orders for class and session listings."""

from datetime import time
from typing import List

from ...models.class_model import ClassOrder


def _start_time_key(cls):
    # Classes without a start time sort after every scheduled one.
    return (cls.start_time is None, cls.start_time or time.min)


def _weekday_key(cls):
    return (cls.weekday is None, cls.weekday if cls.weekday is not None else 0)


def sort_classes(classes: List, order: ClassOrder = ClassOrder.TITLE) -> List:
    """
    Returns a new list of classes in the requested order. Ties are broken by
    class ID so the listing is stable between requests.
    """
    order = ClassOrder(order)
    if order == ClassOrder.TITLE:
        key = lambda c: (c.title, c.id)
    elif order == ClassOrder.START_TIME:
        key = lambda c: (_start_time_key(c), c.id)
    else:
        key = lambda c: (_weekday_key(c), _start_time_key(c), c.id)
    return sorted(classes, key=key)


def sort_sessions_by_start(sessions: List) -> List:
    return sorted(sessions, key=lambda s: (s.start, s.id))
