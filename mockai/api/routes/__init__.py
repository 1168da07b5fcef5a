from __future__ import annotations

from mockai.api.routes.audio import router as audio_router
from mockai.api.routes.batch import router as batch_router
from mockai.api.routes.chat import router as chat_router
from mockai.api.routes.embeddings import router as embeddings_router
from mockai.api.routes.files import router as files_router
from mockai.api.routes.fine_tuning import router as fine_tuning_router
from mockai.api.routes.health import router as health_router
from mockai.api.routes.images import router as images_router
from mockai.api.routes.models import router as models_router
from mockai.api.routes.moderation import router as moderation_router
from mockai.api.routes.text import router as text_router
from mockai.api.routes.uploads import router as uploads_router

# Registration order; the health/metrics router is mounted last
API_ROUTERS = (
    chat_router,
    text_router,
    images_router,
    embeddings_router,
    models_router,
    moderation_router,
    audio_router,
    fine_tuning_router,
    batch_router,
    files_router,
    uploads_router,
)

__all__ = ["API_ROUTERS", "health_router"]
