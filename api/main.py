from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import config, db, errors
from core.logging import configure_logging
from users import router as users_router

configure_logging(config.log_level())


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process; handlers get it through db.get_pool.
    app.state.pool = await db.create_pool()
    try:
        yield
    finally:
        await app.state.pool.close()
        app.state.pool = None


app = FastAPI(lifespan=lifespan)

# Allow a local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.register_error_handlers(app)

app.include_router(users_router.router, tags=["users"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
