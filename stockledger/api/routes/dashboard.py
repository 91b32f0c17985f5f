"""Dashboard endpoint."""

from fastapi import APIRouter, Depends

from stockledger.api.dependencies import get_dashboard_use_case, get_owner_id
from stockledger.application.dto.responses import DashboardResponse, ErrorResponse
from stockledger.application.use_cases import GetDashboardMetricsUseCase

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardResponse,
    responses={401: {"model": ErrorResponse}},
)
async def get_dashboard(
    owner_id: str = Depends(get_owner_id),
    use_case: GetDashboardMetricsUseCase = Depends(get_dashboard_use_case),
) -> DashboardResponse:
    """Key metrics, trends, stock levels and restock suggestions."""
    metrics = await use_case.execute(owner_id)
    return use_case.to_response(metrics)
