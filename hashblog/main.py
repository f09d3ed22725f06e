import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hashblog.errors import install_error_handlers
from hashblog.routers import posts
from hashblog.security import API_KEY_NAME, get_api_key
from hashblog.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="hashblog API", description="Posts API for the hashblog client")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", API_KEY_NAME],
    expose_headers=["Content-Length"],
    max_age=600,
)
install_error_handlers(app)

app.include_router(posts.router)
app.include_router(posts.admin_router, dependencies=[Depends(get_api_key)])


@app.get("/health")
async def health():
    return {"status": "ok"}
