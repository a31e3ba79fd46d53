from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.core.config import settings
from storefront.core.errors import register_exception_handlers
from storefront.routers import (
    addresses,
    auth,
    cart,
    categories,
    dashboard,
    orders,
    payment_cards,
    payments,
    product_types,
    products,
    search,
    subcategories,
    users,
    wishlists,
)

OPENAPI_TAGS = [
    {"name": "Auth", "description": "Sign up, sign in, token refresh and logout."},
    {"name": "Users", "description": "Current user profile and account deletion."},
    {"name": "Addresses", "description": "Saved delivery addresses."},
    {"name": "Wishlists", "description": "Named wishlists of saved products."},
    {"name": "Categories", "description": "Browse and create product categories."},
    {"name": "Subcategories", "description": "Second catalog level under a category."},
    {"name": "Product Types", "description": "Third catalog level with listing facets."},
    {"name": "Products", "description": "Browse products and their variants."},
    {"name": "Search", "description": "Catalog search with price, colour and size hints."},
    {"name": "Cart", "description": "Manage the current user's cart."},
    {"name": "Orders", "description": "Create and track orders."},
    {"name": "Payment Cards", "description": "Vault of saved, tokenized payment cards."},
    {"name": "Payments", "description": "Pay for orders and browse payment history."},
    {"name": "Dashboard", "description": "Composite home screen sections."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description="E-commerce API: catalog, search, cart, wishlists, orders and card payments.",
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Idempotency-Replayed"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(addresses.router, prefix="/addresses", tags=["Addresses"])
app.include_router(wishlists.router, prefix="/wishlists", tags=["Wishlists"])
app.include_router(categories.router, prefix="/categories", tags=["Categories"])
app.include_router(subcategories.router, prefix="/subcategories", tags=["Subcategories"])
app.include_router(product_types.router, prefix="/product-types", tags=["Product Types"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(search.router, prefix="/search", tags=["Search"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(payment_cards.router, prefix="/payment-cards", tags=["Payment Cards"])
app.include_router(payments.router, prefix="/payments", tags=["Payments"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])


@app.get("/health")
async def health() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
