"""Inserción de mensajes con actualización de la conversación y notificación."""

from marketplace.application.interfaces.change_notifier import EVENT_INSERT, ChangeEvent, ChangeNotifier
from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.message_repo import MessageRepo
from marketplace.application.interfaces.transaction_manager import TransactionManager
from marketplace.domain.entities.message import Message


def message_row(message: Message) -> dict:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "type": message.type.value,
        "content": message.content,
        "price": str(message.price) if message.price is not None else None,
        "meta": message.meta,
        "created_at": message.created_at.isoformat() if message.created_at else None,
    }


async def append_message(
    transaction_manager: TransactionManager,
    message_repo: MessageRepo,
    conversation_repo: ConversationRepo,
    notifier: ChangeNotifier,
    message: Message,
) -> None:
    async with transaction_manager.start():
        await message_repo.create(message)
        await conversation_repo.touch(message.conversation_id, message.created_at)
    await notifier.publish(ChangeEvent(table="messages", event=EVENT_INSERT, row=message_row(message)))
