from fastapi import FastAPI

from contest_store.catalog import router as catalog_router

# Catalog reads plus batch writes for the scraper.
app = FastAPI(title="contest-store")

app.include_router(catalog_router.router, tags=["catalog"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "contest-store api"}
