"""DTOs para conversaciones y negociación."""

from dataclasses import dataclass, field

from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.message import Message
from marketplace.domain.services.negotiation import ComposerMode, ReservationWindow


@dataclass
class ConversationSummaryDTO:
    """Conversación con la vista previa del último mensaje."""

    conversation: Conversation
    role: str
    counterpart_id: str
    last_message_preview: str = ""


@dataclass
class NegotiationStateDTO:
    """Estado de la negociación visto por un participante."""

    conversation_id: str
    role: str
    composer_mode: ComposerMode
    latest_offer: Message | None = None
    open_offer: Message | None = None
    acceptance: Message | None = None
    window: ReservationWindow | None = None
    suggestions: list[int] = field(default_factory=list)
