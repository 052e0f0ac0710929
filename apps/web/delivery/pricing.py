"""
Delivery pricing - distance-based fee schedule and service-area gate.

Fee = base fee for the first included kilometers, plus a per-kilometer rate
beyond them. Addresses farther than the maximum radius are not served.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from storefront_schemas import RouteEstimate

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class FeeSchedule:
    """Delivery fee parameters for a restaurant."""

    base_fee: Decimal = Decimal("5.00")
    per_km_fee: Decimal = Decimal("1.00")
    included_km: Decimal = Decimal("2")
    max_distance_km: Decimal = Decimal("100")
    fallback_fee: Decimal = Decimal("5.99")
    average_speed_kmh: Decimal = Decimal("40")


DEFAULT_FEE_SCHEDULE = FeeSchedule()


@dataclass(frozen=True)
class DeliveryEstimate:
    """Outcome of pricing a route: either a fee or the reason delivery is refused."""

    available: bool
    message: str
    distance_km: float | None = None
    duration_minutes: int | None = None
    fee: Decimal | None = None
    max_distance_km: Decimal | None = None
    estimated_delivery_time: datetime | None = None

    @property
    def fee_in_cents(self) -> int | None:
        if self.fee is None:
            return None
        return int((self.fee * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_delivery_fee(
    distance_km: float | Decimal,
    schedule: FeeSchedule = DEFAULT_FEE_SCHEDULE,
) -> Decimal:
    """
    Calculate the delivery fee for a distance.

    With the default schedule: $5 up to 2 km, then $1 per km beyond.

    >>> calculate_delivery_fee(1.5)
    Decimal('5.00')
    >>> calculate_delivery_fee(7.25)
    Decimal('10.25')
    """
    distance = Decimal(str(distance_km))

    if distance <= schedule.included_km:
        return schedule.base_fee.quantize(CENTS, rounding=ROUND_HALF_UP)

    fee = schedule.base_fee + (distance - schedule.included_km) * schedule.per_km_fee
    return fee.quantize(CENTS, rounding=ROUND_HALF_UP)


def quote_delivery(
    route: RouteEstimate | None,
    schedule: FeeSchedule = DEFAULT_FEE_SCHEDULE,
    now: datetime | None = None,
) -> DeliveryEstimate:
    """
    Price a route, gating availability by the maximum delivery radius.

    Args:
        route: Estimated route, or None if the distance could not be computed
        schedule: Fee schedule of the restaurant
        now: Reference time for the estimated delivery time

    Returns:
        DeliveryEstimate (available=False when unroutable or too far)
    """
    if route is None:
        return DeliveryEstimate(
            available=False,
            message="Unable to calculate delivery distance. Please try again.",
        )

    if Decimal(str(route.distance_km)) > schedule.max_distance_km:
        return DeliveryEstimate(
            available=False,
            message=(
                "Delivery not available - distance exceeds our service area "
                f"({route.distance_km:.1f}km requested, "
                f"max {float(schedule.max_distance_km):g}km)"
            ),
            distance_km=route.distance_km,
            max_distance_km=schedule.max_distance_km,
        )

    current = now or datetime.now(UTC)
    return DeliveryEstimate(
        available=True,
        message=f"Delivery available in {route.duration_minutes} minutes",
        distance_km=route.distance_km,
        duration_minutes=route.duration_minutes,
        fee=calculate_delivery_fee(route.distance_km, schedule),
        max_distance_km=schedule.max_distance_km,
        estimated_delivery_time=current + timedelta(minutes=route.duration_minutes),
    )
