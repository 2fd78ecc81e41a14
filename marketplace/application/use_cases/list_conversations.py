from marketplace.application.dtos.conversation_dto import ConversationSummaryDTO
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.use_cases.access import conversation_role, require_principal
from marketplace.domain.entities.principal import Principal
from marketplace.domain.services.negotiation import message_preview


class ListConversationsUseCase:
    def __init__(self, conversation_repo: ConversationRepo, message_repo: MessageRepo) -> None:
        self._conversation_repo = conversation_repo
        self._message_repo = message_repo

    async def execute(self, principal: Principal | None) -> list[ConversationSummaryDTO]:
        principal = require_principal(principal)
        conversations = await self._conversation_repo.list_for_participant(principal.id)
        latest = await self._message_repo.latest_for_conversations([c.id for c in conversations])

        return [
            ConversationSummaryDTO(
                conversation=conversation,
                role=conversation_role(conversation, principal),
                counterpart_id=conversation.counterpart_of(principal.id),
                last_message_preview=message_preview(latest[conversation.id]) if conversation.id in latest else "",
            )
            for conversation in conversations
        ]
