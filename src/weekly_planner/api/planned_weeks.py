"""Planned week API endpoints with token-based tenant resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import (
    APIRouter,
    Depends,
    Header,
    HTTPException,
    Query,
    Request,
    Response,
    status,
)

from weekly_planner.api.schemas import (
    CreatePlannedWeekRequest,
    DayPlanResponse,
    PaginationResponse,
    PlannedWeekListResponse,
    PlannedWeekResponse,
    UpdateDayPlanRequest,
    WeekStartDayPayload,
)
from weekly_planner.config import parse_api_tokens
from weekly_planner.domain.calendar import MealSlot
from weekly_planner.domain.errors import PlanError, PlanErrorKind
from weekly_planner.domain.pagination import PaginationOptions
from weekly_planner.domain.planned_weeks import MealAssignment
from weekly_planner.services.planned_weeks import PlannedWeekFilters

if TYPE_CHECKING:
    from weekly_planner.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["planned-weeks"])

_STATUS_BY_KIND: dict[PlanErrorKind, int] = {
    PlanErrorKind.INVALID_DATE: status.HTTP_400_BAD_REQUEST,
    PlanErrorKind.MISALIGNED_WEEK_START: status.HTTP_400_BAD_REQUEST,
    PlanErrorKind.DAY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    PlanErrorKind.WEEK_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    PlanErrorKind.WEEK_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    PlanErrorKind.STALE_WRITE: status.HTTP_409_CONFLICT,
    PlanErrorKind.INVALID_WEEK_START_DAY: status.HTTP_400_BAD_REQUEST,
    PlanErrorKind.SNAPSHOT_PRECONDITION: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _get_api_tokens(request: Request) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    return parse_api_tokens(container.settings.api_tokens)


async def require_tenant(
    x_api_token: str | None = Header(default=None),
    api_tokens: dict[str, str] = Depends(_get_api_tokens),
) -> str:
    """Resolve the calling tenant from its API token."""
    tenant_id = api_tokens.get(x_api_token) if x_api_token else None
    if tenant_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return tenant_id


@contextmanager
def _plan_errors() -> Iterator[None]:
    """Translate planned week errors into HTTP errors by kind."""
    try:
        yield
    except PlanError as exc:
        status_code = _STATUS_BY_KIND[exc.kind]
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.exception("Planned week request failed")
        raise HTTPException(
            status_code=status_code,
            detail={"kind": exc.kind.value, "message": exc.message},
        ) from exc


@router.post("/planned-weeks", status_code=status.HTTP_201_CREATED)
async def create_planned_week(
    body: CreatePlannedWeekRequest,
    request: Request,
    tenant_id: str = Depends(require_tenant),
) -> PlannedWeekResponse:
    """Create a week starting on the tenant's configured week start day."""
    container: AppContainer = request.app.state.container
    with _plan_errors():
        plan = container.planned_week_service.create_week(tenant_id, body.starting_date)
        return PlannedWeekResponse.from_domain(plan)


@router.get("/planned-weeks")
async def list_planned_weeks(  # noqa: PLR0913
    request: Request,
    tenant_id: str = Depends(require_tenant),
    start_date: str | None = None,
    end_date: str | None = None,
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
) -> PlannedWeekListResponse:
    """Return a page of the tenant's weeks."""
    container: AppContainer = request.app.state.container
    settings = container.settings
    resolved_limit = min(limit or settings.default_page_limit, settings.max_page_limit)
    with _plan_errors():
        result = container.planned_week_service.list_weeks(
            tenant_id,
            PlannedWeekFilters(start_date=start_date, end_date=end_date),
            PaginationOptions(limit=resolved_limit, offset=offset),
        )
        return PlannedWeekListResponse(
            data=[PlannedWeekResponse.from_domain(plan) for plan in result.items],
            pagination=PaginationResponse(
                offset=result.offset,
                limit=result.limit,
                total=result.total,
                has_more=result.has_more,
            ),
        )


@router.get("/planned-weeks/{week_id}")
async def get_planned_week(
    week_id: UUID, request: Request, tenant_id: str = Depends(require_tenant)
) -> PlannedWeekResponse:
    """Return one of the tenant's weeks."""
    container: AppContainer = request.app.state.container
    with _plan_errors():
        plan = container.planned_week_service.get_week(tenant_id, week_id)
        return PlannedWeekResponse.from_domain(plan)


@router.delete("/planned-weeks/{week_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_planned_week(
    week_id: UUID, request: Request, tenant_id: str = Depends(require_tenant)
) -> Response:
    """Delete one of the tenant's weeks."""
    container: AppContainer = request.app.state.container
    with _plan_errors():
        container.planned_week_service.delete_week(tenant_id, week_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/planned-weeks/{week_id}/leftovers")
async def populate_leftovers(
    week_id: UUID, request: Request, tenant_id: str = Depends(require_tenant)
) -> PlannedWeekResponse:
    """Fill empty lunches from the previous day's dinner."""
    container: AppContainer = request.app.state.container
    with _plan_errors():
        plan = container.planned_week_service.populate_leftovers(tenant_id, week_id)
        return PlannedWeekResponse.from_domain(plan)


@router.get("/planned-weeks/{week_id}/days/{date}")
async def get_day_plan(
    week_id: UUID,
    date: str,
    request: Request,
    tenant_id: str = Depends(require_tenant),
) -> DayPlanResponse:
    """Return one day of a week."""
    container: AppContainer = request.app.state.container
    with _plan_errors():
        plan = container.planned_week_service.get_week(tenant_id, week_id)
        return DayPlanResponse.from_domain(plan, plan.get_day_plan(date))


@router.patch("/planned-weeks/{week_id}/days/{date}")
async def update_day_plan(
    week_id: UUID,
    date: str,
    body: UpdateDayPlanRequest,
    request: Request,
    tenant_id: str = Depends(require_tenant),
) -> DayPlanResponse:
    """Assign or clear the lunch and dinner of one day in a single save."""
    container: AppContainer = request.app.state.container
    provided = body.model_fields_set
    changes: dict[MealSlot, MealAssignment | None] = {}
    if "lunch_meal_id" in provided:
        changes[MealSlot.LUNCH] = (
            MealAssignment(meal_id=body.lunch_meal_id) if body.lunch_meal_id else None
        )
    if "dinner_meal_id" in provided:
        changes[MealSlot.DINNER] = (
            MealAssignment(
                meal_id=body.dinner_meal_id, makes_lunch=bool(body.makes_lunch)
            )
            if body.dinner_meal_id
            else None
        )
    with _plan_errors():
        plan = container.planned_week_service.update_day(
            tenant_id, week_id, date, changes
        )
        return DayPlanResponse.from_domain(plan, plan.get_day_plan(date))


@router.get("/settings/week-start-day")
async def get_week_start_day(
    request: Request, tenant_id: str = Depends(require_tenant)
) -> WeekStartDayPayload:
    """Return the tenant's configured week start day."""
    container: AppContainer = request.app.state.container
    return WeekStartDayPayload(
        week_start_day=container.tenant_settings_service.get_week_start_day(tenant_id)
    )


@router.put("/settings/week-start-day")
async def put_week_start_day(
    body: WeekStartDayPayload,
    request: Request,
    tenant_id: str = Depends(require_tenant),
) -> WeekStartDayPayload:
    """Change the week start day used for newly created weeks."""
    container: AppContainer = request.app.state.container
    container.tenant_settings_service.set_week_start_day(tenant_id, body.week_start_day)
    logger.info(
        "Week start day updated: tenant=%s day=%s",
        tenant_id,
        body.week_start_day.value,
    )
    return body
