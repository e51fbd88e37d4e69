from .push_subscriptions import PushSubscriptionsResource

__all__ = [
    "PushSubscriptionsResource",
]
