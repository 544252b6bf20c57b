"""
Protocol library endpoints.
"""

from fastapi import APIRouter, HTTPException, Query, status

from app.pwm.protocols import (
    ProtocolRegistry,
    get_food_phase_flags,
    is_cutting_protocol,
    is_food_phase_protocol,
)
from app.schemas.protocol import ProtocolDay, ProtocolSummary

router = APIRouter()


@router.get(
    "",
    summary="List all available protocols.",
    response_model=list[ProtocolSummary],
)
def list_protocols():
    return [
        ProtocolSummary(
            protocol=plan.protocol,
            name=plan.name,
            description=plan.description,
            cutting=is_cutting_protocol(plan.protocol),
            food_phase=is_food_phase_protocol(plan.protocol),
        )
        for plan in ProtocolRegistry.all().values()
    ]


@router.get(
    "/{protocol_id}",
    summary="Get a protocol's phase, flags and macros for one day.",
    response_model=ProtocolDay,
)
def protocol_day(
    protocol_id: str,
    days_until: int = Query(..., description="Days until weigh-in (negative = recovery)"),
    weight: float = Query(150.0, gt=0, description="Body weight used for per-pound protein"),
):
    try:
        plan = ProtocolRegistry.get_or_raise(protocol_id)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc.args[0])) from exc

    return ProtocolDay(
        protocol=plan.protocol,
        days_until_weigh_in=days_until,
        phase=plan.phase(days_until),
        phase_flags=get_food_phase_flags(plan.protocol, days_until),
        macros=plan.macro_rule(days_until).resolve(weight),
    )
