from marketplace.application.interfaces.change_notifier import ChangeNotifier
from marketplace.application.interfaces.clock import Clock
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.id_generator import IdGenerator
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.application.use_cases.access import load_conversation, require_principal
from marketplace.application.use_cases.messaging import append_message
from marketplace.domain.entities.message import Message, MessageType
from marketplace.domain.entities.principal import Principal
from marketplace.domain.errors import ValidationError

MAX_TEXT_LENGTH = 4000


class SendTextUseCase:
    def __init__(
        self,
        conversation_repo: ConversationRepo,
        message_repo: MessageRepo,
        id_generator: IdGenerator,
        clock: Clock,
        notifier: ChangeNotifier,
        transaction_manager: TransactionManager,
    ) -> None:
        self._conversation_repo = conversation_repo
        self._message_repo = message_repo
        self._id_generator = id_generator
        self._clock = clock
        self._notifier = notifier
        self._transaction_manager = transaction_manager

    async def execute(self, principal: Principal | None, conversation_id: str, content: str) -> Message:
        principal = require_principal(principal)
        text = (content or "").strip()
        if not text:
            raise ValidationError("content", "le message est vide")
        if len(text) > MAX_TEXT_LENGTH:
            raise ValidationError("content", f"maximum {MAX_TEXT_LENGTH} caractères")

        await load_conversation(self._conversation_repo, principal, conversation_id)
        message = Message(
            id=self._id_generator.new_id(),
            conversation_id=conversation_id,
            sender_id=principal.id,
            type=MessageType.TEXT,
            content=text,
            created_at=self._clock.now(),
        )
        await append_message(
            self._transaction_manager, self._message_repo, self._conversation_repo, self._notifier, message
        )
        return message
