from fastapi import Header

from marketplace.domain.entities.principal import Principal


async def get_principal(
    principal_id: str | None = Header(default=None, convert_underscores=False, alias="X-Principal-Id"),
) -> Principal | None:
    """Identidad del solicitante; los casos de uso rechazan la ausencia con 401."""
    if not principal_id or not principal_id.strip():
        return None
    return Principal(id=principal_id.strip())
