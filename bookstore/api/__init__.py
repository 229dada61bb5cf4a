# bookstore/api/__init__.py
from fastapi import FastAPI

from bookstore.api.errors import register_error_handlers
from bookstore.api.routers import books, cart, comments, orders, reviews, stats, users, wishlist

ROUTERS = (users, books, cart, orders, reviews, comments, wishlist, stats)


def create_app() -> FastAPI:
    app = FastAPI(title="Bookstore API", version="1.0.0")

    register_error_handlers(app)
    for module in ROUTERS:
        app.include_router(module.router)

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    return app
