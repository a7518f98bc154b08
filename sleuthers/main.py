"""
Application FastAPI : point d'entrée
====================================

Rôle
----
- Instancie l'app FastAPI, configure le CORS pour le front,
- Monte les routeurs (santé, utilisateurs, parties),
- Traduit les erreurs métier (`GameError`) en réponses HTTP `{detail, kind}`,
- Traduit les corps de requête invalides (validation pydantic) en `400 invalid_argument`,
- Liste les routes au démarrage (diagnostic).

Notes
-----
- Les erreurs d'invariant interne sont journalisées et renvoyées sans leur message.
- Le middleware CORS est ajouté AVANT les include_router.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sleuthers.config.settings import settings
from sleuthers.routes.games import router as games_router
from sleuthers.routes.health import router as health_router
from sleuthers.routes.users import router as users_router
from sleuthers.services.errors import GameError, InternalInvariantViolation

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# ===========================
# CORS (dev: permissif)
# ===========================
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],             # dont Authorization (Basic)
)

# ===========================
# Montage des routers
# ===========================
app.include_router(health_router)
app.include_router(users_router)
app.include_router(games_router)


# ===========================
# Erreurs métier
# ===========================
@app.exception_handler(GameError)
async def game_error_handler(request: Request, exc: GameError):
    if isinstance(exc, InternalInvariantViolation):
        logger.error(
            "internal invariant violation",
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(status_code=exc.status, content={"detail": "Internal error", "kind": exc.kind})
    return JSONResponse(status_code=exc.status, content={"detail": exc.message, "kind": exc.kind})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = tuple(first.get("loc", ())) or ("body",)
    detail = f"{loc[-1]}: {first.get('msg', 'invalid request')}"
    return JSONResponse(status_code=400, content={"detail": detail, "kind": "invalid_argument"})


@app.on_event("startup")
async def list_routes():
    """Liste les routes (path + méthodes) dans les logs au démarrage."""
    for r in app.routes:
        methods = getattr(r, "methods", None)
        if methods:
            logger.info("route %s %s", r.path, sorted(methods))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sleuthers.main:app", host=settings.HOST, port=settings.PORT)
