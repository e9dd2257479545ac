from src.dashboard.attachments import (
    AggregatorInputs,
    AggregatorStatus,
    AttachmentAggregator,
    FilterCriteria,
    OwnerTab,
    UnifiedAttachment,
    filter_attachments,
    normalize_attachments,
)
from src.dashboard.cache import QueryCache, make_key
from src.dashboard.client import ApiClient
from src.dashboard.mutations import Mutation, MutationStatus
from src.dashboard.notifications import Notification, NotificationLevel, Notifier
from src.dashboard.tasks import TaskCompletionToggle

__all__ = [
    "AggregatorInputs",
    "AggregatorStatus",
    "AttachmentAggregator",
    "FilterCriteria",
    "OwnerTab",
    "UnifiedAttachment",
    "filter_attachments",
    "normalize_attachments",
    "QueryCache",
    "make_key",
    "ApiClient",
    "Mutation",
    "MutationStatus",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "TaskCompletionToggle",
]
