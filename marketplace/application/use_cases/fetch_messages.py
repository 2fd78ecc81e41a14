from datetime import datetime
from typing import Sequence

from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.use_cases.access import load_conversation, require_principal
from marketplace.domain.entities.message import Message
from marketplace.domain.entities.principal import Principal
from marketplace.domain.errors import ValidationError

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 500


class FetchMessagesUseCase:
    def __init__(self, conversation_repo: ConversationRepo, message_repo: MessageRepo) -> None:
        self._conversation_repo = conversation_repo
        self._message_repo = message_repo

    async def execute(
        self,
        principal: Principal | None,
        conversation_id: str,
        limit: int = DEFAULT_PAGE_SIZE,
        before: datetime | None = None,
    ) -> Sequence[Message]:
        principal = require_principal(principal)
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError("limit", f"doit être entre 1 et {MAX_PAGE_SIZE}")
        await load_conversation(self._conversation_repo, principal, conversation_id)
        return await self._message_repo.list_for_conversation(conversation_id, limit=limit, before=before)
