from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

MESSAGE_TYPES = ("text", "offer", "offer_accept", "offer_reject", "system")

listings = Table(
    "listings",
    metadata,
    Column("listing_type", String(16), nullable=False),
    Column("id", String(36), nullable=False),
    Column("owner_id", String(36), nullable=False),
    Column("title", String(255), nullable=False, default=""),
    Column("base_price", Numeric(12, 2), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("rental_unit", String(16), nullable=False),
    PrimaryKeyConstraint("listing_type", "id"),
)

listing_add_ons = Table(
    "listing_add_ons",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("listing_type", String(16), nullable=False),
    Column("listing_id", String(36), nullable=False),
    Column("name", String(150), nullable=False),
    Column("price", Numeric(12, 2), nullable=False),
    Column("pricing_model", String(16), nullable=False),
    CheckConstraint("price >= 0", name="listing_add_ons_price_check"),
)

availability_overrides = Table(
    "availability_overrides",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("listing_type", String(16), nullable=False),
    Column("listing_id", String(36), nullable=False),
    Column("date", Date, nullable=False),
    Column("is_available", Boolean, nullable=False, default=True),
    Column("price", Numeric(12, 2)),
    UniqueConstraint("listing_type", "listing_id", "date", name="availability_overrides_unique"),
    CheckConstraint("price IS NULL OR price >= 0", name="availability_overrides_price_check"),
)

reservations = Table(
    "reservations",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("reservation_code", String(50), nullable=False, unique=True),
    Column("listing_type", String(16), nullable=False),
    Column("listing_id", String(36), nullable=False),
    Column("user_id", String(36), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("total_price", Numeric(12, 2), nullable=False),
    Column("commission", Numeric(12, 2), nullable=False),
    Column("price_espece", Numeric(12, 2), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("status", String(16), nullable=False),
    Column("arrival_confirmation", Boolean, nullable=False, default=False),
    Column("espece_confirmation", Boolean, nullable=False, default=False),
    Column("guests_count", Integer, nullable=False, default=1),
    Column("guest_info", JSON),
    Column("source_offer_message_id", String(36)),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("confirmed_at", DateTime(timezone=True)),
    CheckConstraint(
        "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
        name="reservations_status_check",
    ),
)

transactions = Table(
    "transactions",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("reservation_id", String(36), nullable=False),
    Column("user_id", String(36), nullable=False),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("commission", Numeric(12, 2), nullable=False),
    Column("status", String(16), nullable=False),
    Column("payment_method", String(32), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

conversations = Table(
    "conversations",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("listing_id", String(36), nullable=False),
    Column("listing_kind", String(16), nullable=False),
    Column("buyer_id", String(36), nullable=False),
    Column("seller_id", String(36), nullable=False),
    Column("last_message_at", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("listing_id", "listing_kind", "buyer_id", "seller_id", name="conversations_unique"),
)

messages = Table(
    "messages",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(36), nullable=False, unique=True),
    Column("conversation_id", String(36), nullable=False, index=True),
    Column("sender_id", String(36), nullable=False),
    Column("type", String(16), nullable=False),
    Column("content", Text),
    Column("price", Numeric(12, 2)),
    Column("meta", JSON),
    # oferta respondida; una sola respuesta por oferta
    Column("responds_to", String(36), unique=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    CheckConstraint(
        "type IN (" + ", ".join(f"'{t}'" for t in MESSAGE_TYPES) + ")",
        name="messages_type_check",
    ),
)

users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("full_name", String(255), nullable=False, default=""),
    Column("email", String(255)),
    Column("phone", String(50)),
)

idempotency_keys = Table(
    "idempotency_keys",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("scope", String(32), nullable=False),
    Column("idem_key", String(128), nullable=False),
    Column("request_hash", String(64), nullable=False),
    Column("response_json", JSON),
    Column("http_status", Integer),
    Column("reference_id", String(36)),
    UniqueConstraint("scope", "idem_key", name="idempotency_keys_unique"),
)
