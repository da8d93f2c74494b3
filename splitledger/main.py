from fastapi import FastAPI
from splitledger.core.config import settings
from splitledger.core.exceptions import LedgerError, ledger_exception_handler
from splitledger.core.observability import RequestLoggingMiddleware, configure_logging
import splitledger.db.base  # noqa: F401
from splitledger.api.v1.routes.system import router as system_router
from splitledger.api.v1.routes.member import router as member_router
from splitledger.api.v1.routes.group import router as group_router
from splitledger.api.v1.routes.trip import router as trip_router
from splitledger.api.v1.routes.settlement import router as settlement_router

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(RequestLoggingMiddleware)
app.add_exception_handler(LedgerError, ledger_exception_handler)

@app.get("/")
async def root():
    return {"message": "Splitledger Backend is live"}

app.include_router(system_router, prefix="/api/v1/system")
app.include_router(member_router, prefix="/api/v1/members")
app.include_router(group_router, prefix="/api/v1/groups")
app.include_router(trip_router, prefix="/api/v1/trips")
app.include_router(settlement_router, prefix="/api/v1/settlements")
