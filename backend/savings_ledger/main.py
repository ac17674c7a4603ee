from fastapi import FastAPI
import asyncio
from fastapi.middleware.cors import CORSMiddleware

from savings_ledger.core.config import settings
from savings_ledger.core.logging import configure_logging
from savings_ledger.api.routes.users import router as users_router
from savings_ledger.api.routes.ledger import router as ledger_router
from savings_ledger.api.routes.reports import router as reports_router
from savings_ledger.api.routes.sync import router as sync_router
from savings_ledger.services.bank_data_sync import bank_data_sync_loop

configure_logging()

app = FastAPI()

origins = [o.strip() for o in (settings.cors_origins or "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "ok"}

app.include_router(users_router)
app.include_router(ledger_router)
app.include_router(reports_router)
app.include_router(sync_router)

@app.on_event("startup")
async def _start_bank_data_sync():
    if getattr(settings, "bank_data_sync_enabled", True):
        asyncio.create_task(bank_data_sync_loop())
