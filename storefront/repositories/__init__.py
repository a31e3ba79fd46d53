from storefront.repositories.address_repository import AddressRepository
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.dashboard_repository import (
    DashboardContentRepository,
    DashboardRepository,
)
from storefront.repositories.idempotency_repository import IdempotencyRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.payment_card_repository import PaymentCardRepository
from storefront.repositories.payment_repository import PaymentRepository
from storefront.repositories.product_repository import (
    CategoryRepository,
    ProductFilters,
    ProductRepository,
    ProductTypeRepository,
    ProductVariantRepository,
    SubcategoryRepository,
)
from storefront.repositories.refresh_token_repository import RefreshTokenRepository
from storefront.repositories.user_repository import UserRepository
from storefront.repositories.wishlist_repository import (
    WishlistItemRepository,
    WishlistRepository,
)

__all__ = [
    "AddressRepository",
    "CartRepository",
    "CategoryRepository",
    "DashboardContentRepository",
    "DashboardRepository",
    "IdempotencyRepository",
    "OrderRepository",
    "PaymentCardRepository",
    "PaymentRepository",
    "ProductFilters",
    "ProductRepository",
    "ProductTypeRepository",
    "ProductVariantRepository",
    "RefreshTokenRepository",
    "SubcategoryRepository",
    "UserRepository",
    "WishlistItemRepository",
    "WishlistRepository",
]
