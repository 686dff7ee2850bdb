from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from registration_api.api.v1.health import router as health_router
from registration_api.api.v1.players import router as players_router
from registration_api.api.v1.uploads import router as uploads_router
from registration_api.core.errors import register_exception_handlers
from registration_api.core.settings import settings

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(
    health_router,
    prefix=settings.API_PREFIX,
    tags=["Health"],
)
app.include_router(
    uploads_router,
    prefix=settings.API_PREFIX,
    tags=["Uploads"],
)
app.include_router(
    players_router,
    prefix=settings.API_PREFIX,
    tags=["Players"],
)
