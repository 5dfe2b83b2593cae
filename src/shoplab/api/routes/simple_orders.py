"""Simple orders API endpoints (to-one associations only).

GET /api/v2/simple-orders - Lazy member/delivery lookup per order
GET /api/v3/simple-orders - Member and delivery join-fetched
GET /api/v4/simple-orders - Direct column projection
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shoplab.aggregation import orders as reader
from shoplab.api.app import get_db_session
from shoplab.api.routes.orders import get_order_search
from shoplab.db.repo import DbSession
from shoplab.models.domain import OrderSearch
from shoplab.models.types import SimpleOrderListResponse

router = APIRouter()


@router.get("/v2/simple-orders", response_model=SimpleOrderListResponse)
def simple_orders_v2(
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> SimpleOrderListResponse:
    """Orders with member and delivery loaded lazily."""
    return SimpleOrderListResponse(data=reader.read_simple_orders_lazy(session, search))


@router.get("/v3/simple-orders", response_model=SimpleOrderListResponse)
def simple_orders_v3(
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> SimpleOrderListResponse:
    """Orders with member and delivery in one joined query."""
    return SimpleOrderListResponse(data=reader.read_simple_orders_join_fetch(session, search))


@router.get("/v4/simple-orders", response_model=SimpleOrderListResponse)
def simple_orders_v4(
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> SimpleOrderListResponse:
    """Orders projected straight into view columns."""
    return SimpleOrderListResponse(data=reader.read_simple_orders_projection(session, search))
