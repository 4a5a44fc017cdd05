"""POST /v1/quantities/round - order quantity rounding"""

from fastapi import APIRouter

from settlement_gateway.api.v1.schemas import QuantityRoundRequest, QuantityRoundResponse
from settlement_gateway.domain.quantity import ceil_quantity_to_multiple_of_10, round_quantity_to_multiple_of_10

router = APIRouter()


@router.post("/quantities/round", response_model=QuantityRoundResponse)
def round_quantities(request_body: QuantityRoundRequest):
    """Round quantities to multiples of 10 (bulk import rounding or smart order ceiling)"""
    rounder = round_quantity_to_multiple_of_10 if request_body.mode == "import" else ceil_quantity_to_multiple_of_10
    return QuantityRoundResponse(quantities=[rounder(q) for q in request_body.quantities])
