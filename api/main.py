from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from accounts import router as accounts_router
from core import db
from core.logging import setup_logging

@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    # Both store pools live for the whole process.
    await db.init_pools()
    try:
        yield
    finally:
        await db.close_pools()


app = FastAPI(lifespan=lifespan)

# Read-only public endpoints; any origin may call them.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(accounts_router.router, tags=["accounts"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "ledger accounts api"}
