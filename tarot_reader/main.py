import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables from .env file
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

from tarot_reader import __version__
from tarot_reader.config import Settings
from tarot_reader.routes.catalog_routes import router as catalog_router
from tarot_reader.routes.session_routes import router as session_router

settings = Settings.from_env()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Tarot Reader", version=__version__)

app.include_router(session_router)
app.include_router(catalog_router)


@app.get("/health")
def health():
    return {"ok": True}
