import asyncio
from typing import Annotated, AsyncIterator

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import StreamingResponse

from src.common.constants import SSE_HEADERS, SSE_MEDIA_TYPE
from src.services.orders.dependencies import get_order_service, get_payment_gateway
from src.services.orders.payments import PaymentGateway
from src.services.orders.service import OrderService
from src.shared.auth import UserClaims, get_current_user, require_partner
from src.shared.models.common import ApiResponse
from src.shared.models.order_dto import (
    CreateOrderRequest,
    PaymentInitiateRequest,
    UpdateStatusRequest,
)

OrderId = Annotated[int, Path(gt=0)]
CurrentUser = Annotated[UserClaims, Depends(get_current_user)]
Partner = Annotated[UserClaims, Depends(require_partner)]
Service = Annotated[OrderService, Depends(get_order_service)]
Gateway = Annotated[PaymentGateway, Depends(get_payment_gateway)]

router = APIRouter(prefix="/orders", tags=["Orders"])
partner_router = APIRouter(prefix="/partner", tags=["Partner"])
payments_router = APIRouter(tags=["Payments"])


@router.post("", status_code=201)
async def create_order(request: CreateOrderRequest, user: CurrentUser, service: Service):
    order = await service.place_order(user.email, request)
    return ApiResponse.ok(order)


@router.get("")
async def list_orders(user: CurrentUser, service: Service):
    return ApiResponse.ok(await service.list_my_orders(user.email))


@router.get("/{order_id}")
async def get_order(order_id: OrderId, user: CurrentUser, service: Service):
    return ApiResponse.ok(await service.get_order_with_items(order_id))


@router.post("/{order_id}/reorder", status_code=201)
async def reorder(order_id: OrderId, user: CurrentUser, service: Service):
    order = await service.reorder(order_id, user.email)
    return ApiResponse.ok(order)


@router.post("/{order_id}/cancel")
async def cancel_order(order_id: OrderId, user: CurrentUser, service: Service):
    await service.cancel_order(order_id)
    return ApiResponse.ok()


@router.post("/{order_id}/pay")
async def pay_order(order_id: OrderId, user: CurrentUser, service: Service):
    await service.pay_order(order_id)
    return ApiResponse.ok()


async def order_event_stream(
    request: Request,
    service: OrderService,
    order_id: int,
    retry_ms: int,
    keepalive_seconds: float,
) -> AsyncIterator[str]:
    """
    SSE frames for one order: retry hint, then one data frame per event.
    The subscription lives exactly as long as this generator.
    """
    channel = await service.open_stream(order_id)
    try:
        yield f"retry: {retry_ms}\n\n"
        while not await request.is_disconnected():
            try:
                event = await asyncio.wait_for(channel.get(), timeout=keepalive_seconds)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield event.to_sse()
    finally:
        await service.close_stream(order_id, channel)


@router.get("/{order_id}/stream")
async def stream_order(request: Request, order_id: OrderId, user: CurrentUser, service: Service):
    from src.config import settings

    return StreamingResponse(
        order_event_stream(
            request,
            service,
            order_id,
            retry_ms=settings.orders.STREAM_RETRY_MS,
            keepalive_seconds=settings.orders.STREAM_KEEPALIVE_SECONDS,
        ),
        media_type=SSE_MEDIA_TYPE,
        headers=SSE_HEADERS,
    )


@partner_router.get("/orders")
async def list_partner_orders(partner: Partner, service: Service):
    return ApiResponse.ok(await service.list_partner_orders())


@partner_router.post("/orders/{order_id}/status")
async def update_order_status(
    order_id: OrderId,
    request: UpdateStatusRequest,
    partner: Partner,
    service: Service,
):
    await service.set_status(order_id, request.status)
    return ApiResponse.ok()


@payments_router.post("/payments/initiate")
async def initiate_payment(
    request: PaymentInitiateRequest,
    user: CurrentUser,
    gateway: Gateway,
):
    redirect = gateway.initiate(request.provider, request.order_id)
    return ApiResponse.ok(redirect)


@payments_router.post("/webhooks/{provider}")
async def payment_webhook(provider: str, request: Request, gateway: Gateway):
    payload = await request.body()
    return await gateway.acknowledge_webhook(provider, payload)
