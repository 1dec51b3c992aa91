from fastapi import FastAPI
from .routes import media, vehicles

app = FastAPI(title="Leasing Catalog API", version="0.1.0")

app.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
app.include_router(media.router, prefix="/media", tags=["media"])
