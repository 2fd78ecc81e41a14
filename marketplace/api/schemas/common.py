from decimal import Decimal

from pydantic import BaseModel, ConfigDict, condecimal

Money = condecimal(max_digits=12, decimal_places=2)


class MoneyModel(BaseModel):
    """Base de las respuestas con montos: los Decimal salen con 2 decimales."""

    model_config = ConfigDict(json_encoders={Decimal: lambda v: format(v, ".2f")})
