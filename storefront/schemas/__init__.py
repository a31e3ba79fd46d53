from storefront.schemas.address import AddressCreate, AddressResponse, AddressUpdate
from storefront.schemas.auth import (
    AuthData,
    RefreshTokenRequest,
    SigninRequest,
    SignupRequest,
    TokenPair,
    UpdatePasswordRequest,
    UserData,
)
from storefront.schemas.cart import CartItemCreate, CartItemResponse, CartItemUpdate
from storefront.schemas.common import Empty, Envelope, PaginationMeta
from storefront.schemas.dashboard import (
    DashboardBrandCreate,
    DashboardBrandResponse,
    DashboardBrandUpdate,
    DashboardOfferCreate,
    DashboardOfferResponse,
    DashboardOfferUpdate,
)
from storefront.schemas.order import OrderCreate, OrderItemCreate, OrderResponse, OrderUpdate
from storefront.schemas.payment import MakePaymentRequest, PaymentResponse
from storefront.schemas.payment_card import (
    MakeDefaultCardRequest,
    PaymentCardCreate,
    PaymentCardResponse,
    PaymentCardUpdate,
)
from storefront.schemas.product import (
    CategoryCreate,
    CategoryResponse,
    ProductCreate,
    ProductResponse,
    ProductTypeCreate,
    ProductTypeResponse,
    ProductTypeUpdate,
    ProductVariantCreate,
    SubcategoryCreate,
    SubcategoryResponse,
    SubcategoryUpdate,
)
from storefront.schemas.search import SearchData
from storefront.schemas.user import UserResponse, UserUpdate
from storefront.schemas.wishlist import (
    WishlistCreate,
    WishlistItemCreate,
    WishlistItemResponse,
    WishlistResponse,
    WishlistUpdate,
)

__all__ = [
    "AddressCreate",
    "AddressResponse",
    "AddressUpdate",
    "AuthData",
    "CartItemCreate",
    "CartItemResponse",
    "CartItemUpdate",
    "CategoryCreate",
    "CategoryResponse",
    "DashboardBrandCreate",
    "DashboardBrandResponse",
    "DashboardBrandUpdate",
    "DashboardOfferCreate",
    "DashboardOfferResponse",
    "DashboardOfferUpdate",
    "Empty",
    "Envelope",
    "MakeDefaultCardRequest",
    "MakePaymentRequest",
    "OrderCreate",
    "OrderItemCreate",
    "OrderResponse",
    "OrderUpdate",
    "PaginationMeta",
    "PaymentCardCreate",
    "PaymentCardResponse",
    "PaymentCardUpdate",
    "PaymentResponse",
    "ProductCreate",
    "ProductResponse",
    "ProductTypeCreate",
    "ProductTypeResponse",
    "ProductTypeUpdate",
    "ProductVariantCreate",
    "RefreshTokenRequest",
    "SearchData",
    "SigninRequest",
    "SignupRequest",
    "SubcategoryCreate",
    "SubcategoryResponse",
    "SubcategoryUpdate",
    "TokenPair",
    "UpdatePasswordRequest",
    "UserData",
    "UserResponse",
    "UserUpdate",
    "WishlistCreate",
    "WishlistItemCreate",
    "WishlistItemResponse",
    "WishlistResponse",
    "WishlistUpdate",
]
