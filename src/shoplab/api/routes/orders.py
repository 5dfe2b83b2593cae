"""Orders API endpoints.

One read endpoint per loading strategy, for side-by-side comparison:

GET /api/v2/orders - Lazy association walk (N+1)
GET /api/v3/orders - Single join-fetch query
GET /api/v3.1/orders - Paged, to-one joins plus batched items
GET /api/v4/orders - Order rows, then items per order (N+1)
GET /api/v5/orders - Two-phase batch fetch
GET /api/v6/orders - Flat query grouped in memory

POST /api/orders - Place order
POST /api/orders/{order_id}/cancel - Cancel order
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from shoplab import errors
from shoplab.aggregation import orders as reader
from shoplab.api.app import get_db_session
from shoplab.db import repo
from shoplab.db.repo import DbSession
from shoplab.models.domain import OrderSearch, Page
from shoplab.models.types import (
    CancelOrderResponse,
    OrderListResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
)
from shoplab.ordering import service

router = APIRouter()


def get_order_search(
    member_name: str | None = None,
    order_status: Literal["ORDERED", "CANCELLED"] | None = None,
) -> OrderSearch:
    """Dependency building the optional order filter from query params."""
    return OrderSearch(member_name=member_name, order_status=order_status)


@router.get("/v2/orders", response_model=OrderListResponse)
def orders_v2(
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> OrderListResponse:
    """Orders built by walking lazily loaded associations."""
    return OrderListResponse(data=reader.read_orders_lazy(session, search))


@router.get("/v3/orders", response_model=OrderListResponse)
def orders_v3(
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> OrderListResponse:
    """Orders from one join-fetch query, de-duplicated by order."""
    return OrderListResponse(data=reader.read_orders_join_fetch(session, search))


@router.get("/v3.1/orders", response_model=OrderListResponse)
def orders_v3_page(
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1),
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> OrderListResponse:
    """A page of orders with their items batch-loaded."""
    page = Page(offset=offset, limit=limit)
    return OrderListResponse(data=reader.read_orders_paged(session, search, page))


@router.get("/v4/orders", response_model=OrderListResponse)
def orders_v4(
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> OrderListResponse:
    """Order projections with one item query per order."""
    return OrderListResponse(data=reader.read_orders_per_order(session, search))


@router.get("/v5/orders", response_model=OrderListResponse)
def orders_v5(
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> OrderListResponse:
    """Order projections with all items fetched in one IN query."""
    return OrderListResponse(data=reader.read_orders_batch(session, search))


@router.get("/v6/orders", response_model=OrderListResponse)
def orders_v6(
    search: OrderSearch = Depends(get_order_search),
    session: DbSession = Depends(get_db_session),
) -> OrderListResponse:
    """Orders grouped from a single flat order x item query."""
    return OrderListResponse(data=reader.read_orders_flat(session, search))


@router.post("/orders", response_model=PlaceOrderResponse, status_code=201)
def place_order(
    request: PlaceOrderRequest,
    session: DbSession = Depends(get_db_session),
) -> PlaceOrderResponse:
    """Place an order for one item.

    Raises:
        HTTPException: 400 on bad count, 404 on unknown member or item,
            409 when stock is short.
    """
    order_input = service.OrderInput(
        member_id=request.member_id,
        item_id=request.item_id,
        count=request.count,
    )

    try:
        order_id = service.place_order(session, order_input)
    except errors.ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except errors.NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except errors.NotEnoughStockError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    return PlaceOrderResponse(id=order_id)


@router.post("/orders/{order_id}/cancel", response_model=CancelOrderResponse)
def cancel_order(
    order_id: int,
    session: DbSession = Depends(get_db_session),
) -> CancelOrderResponse:
    """Cancel an order.

    Raises:
        HTTPException: 404 if order not found, 409 if it cannot be cancelled.
    """
    try:
        service.cancel_order(session, order_id)
    except errors.NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except errors.OrderStateError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    order = repo.get_order(session, order_id)
    return CancelOrderResponse(id=order.order_id, order_status=order.status)
