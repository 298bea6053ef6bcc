"""FastAPI routes over the shared shopping cart.

Every route works on the storefront attached to ``app.state.storefront``;
the routes never touch storage directly. Calls that reach the marketplace
backend run in the thread pool so they do not block the event loop.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from ordering.api.schemas import (
    AddToCartRequest,
    BadgeResponse,
    CartLineSchema,
    CartResponse,
    CheckoutRequest,
    OrderSummaryResponse,
    PlacedOrderResponse,
    UpdateCartQuantityRequest,
)
from ordering.cart.cart import ShoppingCart
from ordering.checkout.assembler import CheckoutFailed
from shared.api import ApiError


def get_storefront(request: Request):
    return request.app.state.storefront


def get_cart(storefront=Depends(get_storefront)) -> ShoppingCart:
    return storefront.cart


def _cart_response(cart: ShoppingCart) -> CartResponse:
    return CartResponse(
        items=[
            CartLineSchema(
                product_id=str(item.product_id),
                name=item.name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                category=item.category,
                image_ref=item.image_ref,
                return_policy=item.return_policy,
                line_total=item.line_total,
            )
            for item in cart.items
        ],
        item_count=cart.item_count,
        subtotal=cart.subtotal,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def show_cart(cart: ShoppingCart = Depends(get_cart)) -> CartResponse:
    return _cart_response(cart)


@cart_router.get("/badge", response_model=BadgeResponse)
async def show_badge(cart: ShoppingCart = Depends(get_cart)) -> BadgeResponse:
    return BadgeResponse(count=cart.item_count)


@cart_router.get("/summary", response_model=OrderSummaryResponse)
async def show_summary(storefront=Depends(get_storefront)) -> OrderSummaryResponse:
    summary = storefront.checkout.summary()
    return OrderSummaryResponse(
        item_count=summary.item_count,
        subtotal=summary.subtotal,
        shipping=summary.shipping,
        total=summary.total,
    )


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, storefront=Depends(get_storefront)) -> CartResponse:
    try:
        product = await run_in_threadpool(storefront.catalogue.get_product, body.product_id)
    except ApiError as exc:
        status_code = 404 if exc.status_code == 404 else 502
        raise HTTPException(status_code=status_code, detail=exc.message) from exc

    storefront.cart.add_item(product, body.quantity)
    return _cart_response(storefront.cart)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    body: UpdateCartQuantityRequest,
    cart: ShoppingCart = Depends(get_cart),
) -> CartResponse:
    cart.update_quantity(product_id, body.quantity)
    return _cart_response(cart)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, cart: ShoppingCart = Depends(get_cart)) -> CartResponse:
    cart.remove_item(product_id)
    return _cart_response(cart)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(cart: ShoppingCart = Depends(get_cart)) -> CartResponse:
    cart.clear()
    return _cart_response(cart)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=PlacedOrderResponse)
async def place_order(body: CheckoutRequest, storefront=Depends(get_storefront)) -> PlacedOrderResponse:
    form = body.model_dump(exclude={"payment_method"})
    try:
        order = await run_in_threadpool(storefront.checkout.submit, form, body.payment_method)
    except CheckoutFailed as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return PlacedOrderResponse(order_id=order.id, total=order.total, status=order.status)
