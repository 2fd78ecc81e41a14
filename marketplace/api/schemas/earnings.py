from decimal import Decimal

from marketplace.api.schemas.common import MoneyModel
from marketplace.domain.services.settlement import EarningsReport


class EarningsResponse(MoneyModel):
    granularity: str
    labels: list[str]
    values: list[Decimal]
    counts: list[int]
    total_net: Decimal
    total_commission: Decimal
    reservation_count: int

    @classmethod
    def from_report(cls, report: EarningsReport) -> "EarningsResponse":
        return cls(
            granularity=report.granularity.value,
            labels=report.labels,
            values=report.values,
            counts=report.counts,
            total_net=report.total_net,
            total_commission=report.total_commission,
            reservation_count=report.reservation_count,
        )
