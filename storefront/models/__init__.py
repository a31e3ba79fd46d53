from storefront.models.address import Address
from storefront.models.cart_item import CartItem
from storefront.models.dashboard_content import DashboardBrand, DashboardOffer
from storefront.models.idempotency_record import IdempotencyRecord
from storefront.models.order import (
    Order,
    OrderItem,
    OrderPaymentStatus,
    OrderRating,
    OrderStatus,
)
from storefront.models.payment import Payment
from storefront.models.payment_card import PaymentCard
from storefront.models.product import (
    Category,
    Product,
    ProductType,
    ProductVariant,
    Subcategory,
)
from storefront.models.refresh_token import RefreshToken
from storefront.models.user import User
from storefront.models.wishlist import Wishlist, WishlistItem

__all__ = [
    "Address",
    "CartItem",
    "Category",
    "DashboardBrand",
    "DashboardOffer",
    "IdempotencyRecord",
    "Order",
    "OrderItem",
    "OrderPaymentStatus",
    "OrderRating",
    "OrderStatus",
    "Payment",
    "PaymentCard",
    "Product",
    "ProductType",
    "ProductVariant",
    "RefreshToken",
    "Subcategory",
    "User",
    "Wishlist",
    "WishlistItem",
]
