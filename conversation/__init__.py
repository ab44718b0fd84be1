"""
Per-user conversation state: typed state variants and the keyed store.
"""
import functools

from .store import ConversationStore, get_conversations, STORE_KEY
from .states import (
    ConversationState,
    AwaitingName,
    AwaitingRole,
    ServiceTitle,
    ServiceDescription,
    ServicePrice,
    ServiceDelivery,
    ServicePayment,
    RequestFile,
    ServiceSnapshot,
    RequirementsDraft,
    CollectRequirements,
    TypingRequirements,
    UploadingDocs,
    CreatingQuote,
    MessagingBuyer,
    MessagingSeller,
    SearchKeyword,
    ALL_STATES,
)


def per_user(handler):
    """Run a handler under the caller's conversation lock.

    Only registered entry points are wrapped; they must not call each other.
    """
    @functools.wraps(handler)
    async def wrapper(update, context):
        user = update.effective_user
        if user is None:
            return await handler(update, context)
        async with get_conversations(context).lock(user.id):
            return await handler(update, context)
    return wrapper


__all__ = [
    'ConversationStore', 'get_conversations', 'STORE_KEY', 'per_user',
    'ConversationState', 'AwaitingName', 'AwaitingRole',
    'ServiceTitle', 'ServiceDescription', 'ServicePrice', 'ServiceDelivery', 'ServicePayment',
    'RequestFile', 'ServiceSnapshot', 'RequirementsDraft',
    'CollectRequirements', 'TypingRequirements', 'UploadingDocs',
    'CreatingQuote', 'MessagingBuyer', 'MessagingSeller', 'SearchKeyword',
    'ALL_STATES',
]
