"""Carga de agregados con verificación de pertenencia del principal."""

from marketplace.application.interfaces.conversation_repo import ConversationRepo
from marketplace.application.interfaces.listing_repo import ListingRepo
from marketplace.application.interfaces.reservation_repo import ReservationRepo
from marketplace.domain.entities.conversation import Conversation
from marketplace.domain.entities.listing import Listing, ListingKind
from marketplace.domain.entities.principal import Principal
from marketplace.domain.entities.reservation import Reservation
from marketplace.domain.errors import (
    AuthenticationRequiredError,
    ConversationNotFoundError,
    ListingNotFoundError,
    NotAllowedError,
    ReservationNotFoundError,
)

ROLE_BUYER = "buyer"
ROLE_SELLER = "seller"
ROLE_OWNER = "owner"


def require_principal(principal: Principal | None) -> Principal:
    if principal is None:
        raise AuthenticationRequiredError()
    return principal


async def load_listing(listing_repo: ListingRepo, kind: ListingKind, listing_id: str) -> Listing:
    listing = await listing_repo.get(kind, listing_id)
    if listing is None:
        raise ListingNotFoundError(kind.value, listing_id)
    return listing


async def load_owned_listing(
    listing_repo: ListingRepo,
    principal: Principal,
    kind: ListingKind,
    listing_id: str,
    operation: str,
) -> Listing:
    listing = await load_listing(listing_repo, kind, listing_id)
    if not listing.is_owned_by(principal.id):
        raise NotAllowedError(operation, "réservé au propriétaire de l'annonce")
    return listing


async def load_conversation(
    conversation_repo: ConversationRepo,
    principal: Principal,
    conversation_id: str,
) -> Conversation:
    conversation = await conversation_repo.get(conversation_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)
    if not conversation.is_participant(principal.id):
        raise NotAllowedError("accéder à la conversation", "vous n'êtes pas participant")
    return conversation


def conversation_role(conversation: Conversation, principal: Principal) -> str:
    return ROLE_BUYER if conversation.is_buyer(principal.id) else ROLE_SELLER


async def load_reservation(
    reservation_repo: ReservationRepo,
    listing_repo: ListingRepo,
    principal: Principal,
    reservation_id: str,
) -> tuple[Reservation, Listing | None, str]:
    """
    Carga la reservación y el rol del principal.

    Returns:
        (reservación, anuncio o None, rol ``buyer`` | ``owner``).
    """
    reservation = await reservation_repo.get(reservation_id)
    if reservation is None:
        raise ReservationNotFoundError(reservation_id)
    listing = await listing_repo.get(reservation.listing_kind, reservation.listing_id)
    if listing is not None and listing.is_owned_by(principal.id):
        return reservation, listing, ROLE_OWNER
    if reservation.user_id == principal.id:
        return reservation, listing, ROLE_BUYER
    raise NotAllowedError("accéder à la réservation", "vous n'êtes ni client ni propriétaire")
