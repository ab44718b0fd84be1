"""
Conversation state variants.

Each multi-turn flow step is its own frozen dataclass carrying only the fields
that step needs. ``step`` is the tag stored for logging and display; dispatch
tables key on the class itself.
"""
from dataclasses import dataclass, field, replace
from typing import ClassVar, Optional, Tuple

from utils.constants import FILE_KIND_LABELS


@dataclass(frozen=True)
class ConversationState:
    step: ClassVar[str] = ''


# ========== REGISTRATION ==========
@dataclass(frozen=True)
class AwaitingName(ConversationState):
    step: ClassVar[str] = 'name'


@dataclass(frozen=True)
class AwaitingRole(ConversationState):
    step: ClassVar[str] = 'role'
    name: str = ''
    username: Optional[str] = None


# ========== SERVICE CREATION ==========
@dataclass(frozen=True)
class ServiceTitle(ConversationState):
    step: ClassVar[str] = 'service_title'


@dataclass(frozen=True)
class ServiceDescription(ConversationState):
    step: ClassVar[str] = 'service_description'
    title: str = ''


@dataclass(frozen=True)
class ServicePrice(ConversationState):
    step: ClassVar[str] = 'service_price'
    title: str = ''
    description: str = ''


@dataclass(frozen=True)
class ServiceDelivery(ConversationState):
    step: ClassVar[str] = 'service_delivery'
    title: str = ''
    description: str = ''
    price: float = 0.0


@dataclass(frozen=True)
class ServicePayment(ConversationState):
    step: ClassVar[str] = 'service_payment'
    title: str = ''
    description: str = ''
    price: float = 0.0
    delivery: str = ''


# ========== PURCHASE / REQUIREMENTS ==========
@dataclass(frozen=True)
class RequestFile:
    file_id: str
    kind: str
    file_name: str

    @property
    def info(self):
        label = FILE_KIND_LABELS.get(self.kind, '📎 File')
        return f"{label}: {self.file_name}" if self.kind == 'document' else label


@dataclass(frozen=True)
class ServiceSnapshot:
    service_id: int
    title: str
    seller_id: int
    seller_name: str
    net_price: float


@dataclass(frozen=True)
class RequirementsDraft(ConversationState):
    """Shared fields of the three requirement-collection steps"""
    service: Optional[ServiceSnapshot] = None
    requirements: Tuple[str, ...] = field(default_factory=tuple)
    files: Tuple[RequestFile, ...] = field(default_factory=tuple)

    @property
    def service_id(self):
        return self.service.service_id if self.service else None

    def with_text(self, text):
        return replace(self, requirements=self.requirements + (f"📝 {text}",))

    def with_file(self, request_file):
        return replace(
            self,
            requirements=self.requirements + (request_file.info,),
            files=self.files + (request_file,)
        )

    def switch_to(self, variant):
        """Move to another requirements step keeping everything collected so far"""
        return variant(service=self.service, requirements=self.requirements, files=self.files)


@dataclass(frozen=True)
class CollectRequirements(RequirementsDraft):
    step: ClassVar[str] = 'collect_requirements'


@dataclass(frozen=True)
class TypingRequirements(RequirementsDraft):
    step: ClassVar[str] = 'typing_requirements'


@dataclass(frozen=True)
class UploadingDocs(RequirementsDraft):
    step: ClassVar[str] = 'uploading_docs'


# ========== ORDER CONVERSATIONS ==========
@dataclass(frozen=True)
class CreatingQuote(ConversationState):
    step: ClassVar[str] = 'creating_quote'
    order_id: int = 0


@dataclass(frozen=True)
class MessagingBuyer(ConversationState):
    step: ClassVar[str] = 'messaging_buyer'
    order_id: int = 0


@dataclass(frozen=True)
class MessagingSeller(ConversationState):
    step: ClassVar[str] = 'messaging_seller'
    order_id: int = 0


# ========== SEARCH ==========
@dataclass(frozen=True)
class SearchKeyword(ConversationState):
    step: ClassVar[str] = 'search_keyword'


ALL_STATES = (
    AwaitingName, AwaitingRole,
    ServiceTitle, ServiceDescription, ServicePrice, ServiceDelivery, ServicePayment,
    CollectRequirements, TypingRequirements, UploadingDocs,
    CreatingQuote, MessagingBuyer, MessagingSeller,
    SearchKeyword,
)
