import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from booking_pricing.engine import PricingEngine, BookingPricingRequest
from booking_pricing.policy.payment_policy import resolve_payment_method

def debug():
    engine = PricingEngine()
    
    print(f"Loaded Catalog: {engine.catalog!r}")
    print(f"Price channel: {engine.price_channel}")
    print("\nSession Options:")
    for option in engine.get_session_options():
        print(f"  {option['value']:<14} {option['label']} ({option['duration']} min)")
    
    # Test Case: 90 minute session with hot stones
    print("\n--- Testing 90min + Hot Stones ---")
    req = BookingPricingRequest(service_type="90min", selected_addons=["hot_stones"])
    available = [a.id for a in engine.get_available_addons(req.service_type)]
    print(f"Add-ons available for {req.service_type}: {available}")
    print(engine.calculate_booking_pricing(req).to_legacy_dict())
    
    # Test Case: Comp booking with a tip
    print("\n--- Testing Comp Booking With Tip ---")
    req = BookingPricingRequest(service_type="60min", tip_amount="25", payment_status="complimentary")
    result = engine.calculate_booking_pricing(req)
    print(result.to_legacy_dict())
    decision = resolve_payment_method(req.payment_status, req.tip_amount, "comp")
    print(f"Payment method: {decision.method} ({decision.note})")
    
    # Test Case: Unknown service
    print("\n--- Testing Unknown Service ---")
    req = BookingPricingRequest(service_type="doesnotexist", tip_amount="abc")
    result = engine.calculate_booking_pricing(req)
    print(result.to_legacy_dict())
    print(f"Warnings: {list(result.warnings)}")
    print(f"Strict: {engine.calculate_booking_pricing_strict(req)}")

if __name__ == "__main__":
    debug()
