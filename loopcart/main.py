# loopcart/main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from .catalog import CatalogProvider
from .config import Settings, configure_logging, load_settings
from .core import AddToCartIn, CartOut, ClearCartIn, HealthOut, RemoveFromCartIn
from .database import CartStore
from .errors import NotFoundError
from .models import CartLineItem, Product

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# ---------------------------
# Dependencies
# ---------------------------
def get_catalog(request: Request) -> CatalogProvider:
    return request.app.state.catalog


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


# ---------------------------
# Health
# ---------------------------
@router.get("/health", response_model=HealthOut)
async def health():
    return {
        "status": "OK",
        "message": "LoopCart Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


# ---------------------------
# Product endpoints
# ---------------------------
@router.get("/products", response_model=List[Product])
async def list_products(catalog: CatalogProvider = Depends(get_catalog)):
    products = catalog.list_all()
    logger.info("serving products: %d", len(products))
    return products


@router.get("/products/category/{category}", response_model=List[Product])
async def list_products_by_category(category: str, catalog: CatalogProvider = Depends(get_catalog)):
    return catalog.list_by_category(category)


# ---------------------------
# Cart endpoints
# ---------------------------
@router.get("/cart/{user_id}", response_model=List[CartLineItem])
async def view_cart(user_id: str, store: CartStore = Depends(get_cart_store)):
    return store.get(user_id)


@router.post("/cart/add", response_model=CartOut)
async def cart_add(payload: AddToCartIn, store: CartStore = Depends(get_cart_store)):
    cart = store.add(payload.user_id, payload.product_id, payload.quantity)
    return {"success": True, "cart": cart}


@router.post("/cart/remove", response_model=CartOut)
async def cart_remove(payload: RemoveFromCartIn, store: CartStore = Depends(get_cart_store)):
    cart = store.remove(payload.user_id, payload.product_id)
    return {"success": True, "cart": cart}


@router.post("/cart/clear", response_model=CartOut)
async def cart_clear(payload: ClearCartIn, store: CartStore = Depends(get_cart_store)):
    return {"success": True, "cart": store.clear(payload.user_id)}


# ---------------------------
# Error handlers
# ---------------------------
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=404, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted({".".join(str(p) for p in err.get("loc", ())[1:]) or "body" for err in exc.errors()})
    logger.warning("%s %s: invalid %s", request.method, request.url.path, ", ".join(fields))
    return JSONResponse(status_code=422, content={"error": f"Invalid request: {', '.join(fields)}"})


async def server_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


# ---------------------------
# Frontend fallback
# ---------------------------
def _frontend_file(frontend_dir: Optional[Path], path: str) -> Optional[Path]:
    if frontend_dir is None or not frontend_dir.is_dir():
        return None
    root = frontend_dir.resolve()
    candidate = (root / path).resolve()
    try:
        candidate.relative_to(root)
    except ValueError:
        candidate = root
    if candidate.is_file():
        return candidate
    index = root / "index.html"
    return index if index.is_file() else None


# ---------------------------
# App factory
# ---------------------------
def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[CatalogProvider] = None,
    cart_store: Optional[CartStore] = None,
) -> FastAPI:
    if settings is None:
        settings = load_settings()
    if catalog is None:
        catalog = CatalogProvider()
    # CartStore defines __len__, so an empty store is falsy
    if cart_store is None:
        cart_store = CartStore(catalog)
    frontend_dir = Path(settings.frontend_dir) if settings.frontend_dir else None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("LoopCart server starting on http://%s:%s", settings.host, settings.port)
        logger.info("demo products loaded: %d", len(app.state.catalog))
        yield
        logger.info("shutting down, dropping %d cart(s)", len(app.state.cart_store))
        app.state.cart_store.reset()

    app = FastAPI(title="LoopCart storefront", lifespan=lifespan)
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.cart_store = cart_store

    origins = list(settings.cors_origins) or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, server_error_handler)
    app.include_router(router)

    # registered last so it never shadows the API routes
    @app.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str):
        target = _frontend_file(frontend_dir, full_path)
        if target is None:
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return FileResponse(target)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "loopcart.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
