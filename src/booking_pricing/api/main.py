from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Any, List, Optional
import logging

from ..config.settings import get_settings
from ..config.logging_config import configure_logging
from ..engine import BookingPricingRequest, CatalogError, PricingEngine, UnknownKey
from ..policy.payment_policy import resolve_payment_method, requires_card_processing
from .state import get_engine

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Booking Pricing API",
    description="Session, add-on and booking price calculation",
    version="1.0.0"
)

# Enable CORS for the booking frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CalcRequest(BaseModel):
    serviceType: str = ""
    selectedAddons: List[str] = []
    tipAmount: Any = 0
    isCompBooking: bool = False
    paymentStatus: str = ""
    paymentMethod: str = "credit_card"


class PaymentMethodRequest(BaseModel):
    paymentStatus: str = ""
    tipAmount: Any = 0
    currentMethod: str = "credit_card"


def _to_request(req: CalcRequest) -> BookingPricingRequest:
    return BookingPricingRequest(
        service_type=req.serviceType,
        selected_addons=list(req.selectedAddons),
        tip_amount=req.tipAmount,
        is_comp_booking=req.isCompBooking,
        payment_status=req.paymentStatus,
        payment_method=req.paymentMethod,
    )


@app.get("/")
async def root():
    return {"status": "online", "message": "Booking Pricing API Active"}


@app.get("/api/pricing/sessions")
async def get_sessions(engine: PricingEngine = Depends(get_engine)):
    data = {}
    for key, session in engine.catalog.sessions.items():
        data[key] = {
            "duration": session.duration_minutes,
            "price": session.price_for(engine.price_channel),
            "name": session.title,
            "description": session.description,
            "features": list(session.features),
            "badge": session.badge,
            "popular": session.popular,
            "premium": session.premium,
        }
    return {"success": True, "data": data}


@app.get("/api/pricing/addons")
async def get_addons(session_type: Optional[str] = None, engine: PricingEngine = Depends(get_engine)):
    if session_type:
        addons = engine.get_available_addons(session_type)
    else:
        addons = list(engine.catalog.addons.values())
    data = [
        {
            "id": addon.id,
            "name": addon.name,
            "price": addon.price,
            "duration_adjustment": addon.duration_adjustment_minutes,
            "description": addon.description,
            "category": addon.category,
            "available_for": list(addon.available_for),
        }
        for addon in addons
    ]
    return {"success": True, "data": data}


@app.get("/api/pricing/options")
async def get_options(engine: PricingEngine = Depends(get_engine)):
    return {"success": True, "data": engine.get_session_options()}


@app.post("/api/pricing/calculate")
async def calculate_pricing(req: CalcRequest, engine: PricingEngine = Depends(get_engine)):
    request = _to_request(req)
    try:
        if engine.settings.strict_mode:
            outcome = engine.calculate_booking_pricing_strict(request)
            if isinstance(outcome, UnknownKey):
                raise HTTPException(
                    status_code=422,
                    detail=f"Unknown {outcome.kind} '{outcome.key}'"
                )
            result = outcome.result
        else:
            result = engine.calculate_booking_pricing(request)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Pricing failed for %s", req.serviceType)
        raise HTTPException(status_code=500, detail=str(e))

    body = result.to_legacy_dict()
    body["warnings"] = list(result.warnings)
    body["requiresCardProcessing"] = requires_card_processing(req.paymentMethod, result.final_price)
    return body


@app.post("/api/pricing/payment-method")
async def payment_method(req: PaymentMethodRequest):
    decision = resolve_payment_method(req.paymentStatus, req.tipAmount, req.currentMethod)
    return {"method": decision.method, "changed": decision.changed, "note": decision.note}


@app.post("/api/pricing/reload")
def reload_catalog(engine: PricingEngine = Depends(get_engine)):
    """Re-read the configured catalog files and swap them in."""
    try:
        catalog = engine.reload()
    except (CatalogError, FileNotFoundError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "fingerprint": catalog.fingerprint}


@app.get("/system/status")
async def get_status(engine: PricingEngine = Depends(get_engine)):
    catalog = engine.catalog
    return {
        "engine_active": True,
        "price_channel": engine.price_channel,
        "strict_mode": engine.settings.strict_mode,
        "catalog_fingerprint": catalog.fingerprint,
        "sessions_count": len(catalog.sessions),
        "addons_count": len(catalog.addons),
    }
