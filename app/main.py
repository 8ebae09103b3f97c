from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.fee_types.router import router as fee_types_router
from app.api.v1.fees.router import router as fees_router
from app.api.v1.semesters.router import router as semesters_router
from app.core.logging import setup_logging


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Fee Ledger Backend")

    # CORS: allow the dashboard frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(semesters_router)
    app.include_router(fee_types_router)
    app.include_router(fees_router)

    return app


app = create_app()
