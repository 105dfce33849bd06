"""
Booking pricing regression tests against the bundled reference catalog.
The reference catalog is priced on the web channel (60min = $145).
"""
import pytest

from booking_pricing.engine import (
    BookingPricingRequest,
    Catalog,
    PricingEngine,
    Priced,
    UnknownKey,
)
from booking_pricing.engine.models import AddonCatalogEntry, SessionCatalogEntry
from booking_pricing.engine.pricing_engine import coerce_amount, format_price


SESSION_KEYS = ['60min', '90min', '120min', 'consultation']


# Catalog lookups

@pytest.mark.parametrize("key,expected", [
    ('60min', 145),
    ('90min', 190),
    ('120min', 235),
    ('consultation', 70),
])
def test_session_price_web_channel(engine, key, expected):
    assert engine.get_session_price(key) == expected


@pytest.mark.parametrize("key", ['doesnotexist', '', '60MIN', 'follow_up'])
def test_unknown_session_price_is_zero(engine, key):
    assert engine.get_session_price(key) == 0


def test_app_channel_reads_app_price(catalog, settings):
    engine = PricingEngine(catalog=catalog, price_channel='app', settings=settings)
    assert engine.get_session_price('60min') == 135
    assert engine.get_session_price('consultation') == 60


def test_unknown_channel_rejected(catalog, settings):
    with pytest.raises(ValueError):
        PricingEngine(catalog=catalog, price_channel='kiosk', settings=settings)


@pytest.mark.parametrize("session_type", SESSION_KEYS + ['doesnotexist'])
def test_available_addons_sound_and_complete(engine, catalog, session_type):
    """Every returned add-on lists the session type, and none that does is missing."""
    available = engine.get_available_addons(session_type)
    assert all(session_type in addon.available_for for addon in available)
    expected = [a.id for a in catalog.addons.values() if session_type in a.available_for]
    assert [a.id for a in available] == expected


def test_available_addons_declaration_order(engine):
    ids = [a.id for a in engine.get_available_addons('90min')]
    assert ids == ['reflexology', 'aromatherapy', 'hot_stones', 'cupping']


def test_hot_stones_not_offered_for_60min(engine):
    ids = [a.id for a in engine.get_available_addons('60min')]
    assert 'hot_stones' not in ids
    assert engine.get_available_addons('consultation') == []


def test_addon_total_edge_cases(engine):
    assert engine.calculate_addon_total([]) == 0
    assert engine.calculate_addon_total(['unknown_addon']) == 0
    assert engine.calculate_addon_total(['hot_stones', 'hot_stones']) == 60.0
    assert engine.calculate_addon_total(['reflexology', 'aromatherapy', 'bogus']) == 40.0


def test_duration_adjustment(engine):
    assert engine.calculate_duration_adjustment([]) == 0
    assert engine.calculate_duration_adjustment(['aromatherapy']) == 0
    assert engine.calculate_duration_adjustment(['reflexology', 'cupping']) == 25
    assert engine.calculate_duration_adjustment(['hot_stones', 'hot_stones', 'nope']) == 20


@pytest.mark.parametrize("addon_id,session_type,expected", [
    ('hot_stones', '90min', True),
    ('hot_stones', '60min', False),
    ('reflexology', 'consultation', False),
    ('cupping', '120min', True),
    ('unknown', '60min', False),
])
def test_is_addon_available(engine, addon_id, session_type, expected):
    assert engine.is_addon_available(addon_id, session_type) is expected


@pytest.mark.parametrize("addon_id", [['hot_stones'], {'id': 'hot_stones'}, None, 42])
def test_is_addon_available_non_string_id(engine, addon_id):
    assert engine.is_addon_available(addon_id, '90min') is False


def test_session_options(engine):
    options = engine.get_session_options()
    assert [o['value'] for o in options] == SESSION_KEYS
    assert options[0] == {
        'value': '60min',
        'label': '60-Minute Reset - $145',
        'price': 145,
        'duration': 60,
    }
    assert options[3]['label'] == 'Initial Consultation - $70'


@pytest.mark.parametrize("price,expected", [(145.0, '145'), (25.5, '25.5'), (0, '0')])
def test_format_price(price, expected):
    assert format_price(price) == expected


# Booking pricing scenarios

def test_standard_booking(engine):
    """60min, no add-ons, no tip."""
    result = engine.calculate_booking_pricing(BookingPricingRequest(service_type='60min'))
    assert result.service_price == 145
    assert result.addons_total == 0
    assert result.total_price == 145
    assert result.final_price == 145
    assert result.business_value == 145
    assert result.is_comp_booking is False
    assert result.warnings == ()


def test_booking_with_hot_stones(engine):
    result = engine.calculate_booking_pricing(
        BookingPricingRequest(service_type='90min', selected_addons=['hot_stones'])
    )
    assert result.addons_total == 30
    assert result.duration_adjustment == 10
    assert result.total_price == 220
    assert result.final_price == 220


def test_comp_booking_collects_tip_only(engine):
    result = engine.calculate_booking_pricing(
        BookingPricingRequest(service_type='60min', tip_amount=25, is_comp_booking=True)
    )
    assert result.final_price == 25
    assert result.tip_amount == 25
    assert result.business_value == 145
    assert result.total_price == 145
    assert result.is_comp_booking is True


def test_complimentary_payment_status_is_comp(engine):
    result = engine.calculate_booking_pricing(
        BookingPricingRequest(service_type='120min', selected_addons=['cupping'], payment_status='complimentary')
    )
    assert result.is_comp_booking is True
    assert result.final_price == 0
    assert result.business_value == 255


def test_unknown_service_degrades_to_zero(engine):
    result = engine.calculate_booking_pricing(BookingPricingRequest(service_type='doesnotexist'))
    assert result.service_price == 0
    assert result.total_price == 0
    assert result.final_price == 0
    assert any('doesnotexist' in w for w in result.warnings)


def test_duplicate_addons_charged_twice(engine):
    result = engine.calculate_booking_pricing(
        BookingPricingRequest(service_type='60min', selected_addons=['reflexology', 'reflexology'])
    )
    assert result.addons_total == 50.0
    assert result.duration_adjustment == 30


def test_non_numeric_tip_is_zero(engine):
    result = engine.calculate_booking_pricing(
        BookingPricingRequest(service_type='60min', tip_amount='abc')
    )
    assert result.tip_amount == 0
    assert result.final_price == 145
    assert any('not a number' in w for w in result.warnings)


def test_oversized_tip_is_zero(engine):
    result = engine.calculate_booking_pricing(
        BookingPricingRequest(service_type='60min', tip_amount=10 ** 400)
    )
    assert result.tip_amount == 0
    assert result.final_price == 145
    assert any('not a number' in w for w in result.warnings)


@pytest.mark.parametrize("request_kwargs", [
    {'service_type': '60min', 'tip_amount': 10},
    {'service_type': '90min', 'selected_addons': ['reflexology', 'hot_stones'], 'tip_amount': '12.5'},
    {'service_type': 'consultation', 'selected_addons': ['cupping']},
    {'service_type': 'nope', 'selected_addons': ['aromatherapy'], 'tip_amount': '5'},
])
def test_final_price_invariants(engine, request_kwargs):
    """Non-comp collects total + tip; comp collects the tip only; business value never changes."""
    regular = engine.calculate_booking_pricing(BookingPricingRequest(**request_kwargs))
    assert regular.final_price == regular.service_price + regular.addons_total + regular.tip_amount
    assert regular.business_value == regular.total_price

    comp = engine.calculate_booking_pricing(BookingPricingRequest(is_comp_booking=True, **request_kwargs))
    assert comp.final_price == comp.tip_amount
    assert comp.business_value == comp.service_price + comp.addons_total
    assert comp.business_value == regular.business_value


def test_pricing_is_idempotent(engine):
    request = BookingPricingRequest(service_type='90min', selected_addons=['hot_stones'], tip_amount='7')
    first = engine.calculate_booking_pricing(request)
    second = engine.calculate_booking_pricing(request)
    assert first == second
    assert request.selected_addons == ['hot_stones']


def test_malformed_request_never_raises(engine):
    request = BookingPricingRequest(service_type=None, selected_addons=None, tip_amount=object())
    result = engine.calculate_booking_pricing(request)
    assert result.final_price == 0
    assert result.duration_adjustment == 0


def test_legacy_dict_shape(engine):
    result = engine.calculate_booking_pricing_from_dict({
        'serviceType': '60min',
        'selectedAddons': ['aromatherapy'],
        'tipAmount': '10',
        'paymentStatus': 'paid',
    })
    assert result == {
        'servicePrice': 145,
        'addonsTotal': 15.0,
        'totalPrice': 160.0,
        'tipAmount': 10.0,
        'finalPrice': 170.0,
        'businessValue': 160.0,
        'isCompBooking': False,
        'durationAdjustment': 0,
    }


def test_from_dict_defaults():
    request = BookingPricingRequest.from_dict(None)
    assert request.service_type == ''
    assert request.selected_addons == []
    assert request.tip_amount == 0
    assert request.is_comp_booking is False
    assert request.payment_status == ''
    assert request.payment_method == 'credit_card'


@pytest.mark.parametrize("raw,expected", [
    (25, 25.0),
    ('12.50abc', 12.5),
    (' 7 ', 7.0),
    ('.5', 0.5),
    ('1e2', 100.0),
    ('-5', -5.0),
    ('abc', 0.0),
    ('', 0.0),
    (None, 0.0),
    (True, 0.0),
    (float('nan'), 0.0),
    (float('inf'), 0.0),
    ('Infinity', 0.0),
    (10 ** 400, 0.0),
])
def test_coerce_amount(raw, expected):
    assert coerce_amount(raw) == expected


# Strict mode

def test_strict_unknown_session(engine):
    outcome = engine.calculate_booking_pricing_strict(
        BookingPricingRequest(service_type='doesnotexist', selected_addons=['bogus'])
    )
    assert outcome == UnknownKey(key='doesnotexist', kind='session')


def test_strict_unknown_addon(engine):
    outcome = engine.calculate_booking_pricing_strict(
        BookingPricingRequest(service_type='60min', selected_addons=['reflexology', 'bogus'])
    )
    assert outcome == UnknownKey(key='bogus', kind='addon')


def test_strict_known_keys_match_permissive(engine):
    request = BookingPricingRequest(service_type='90min', selected_addons=['hot_stones'], tip_amount=5)
    outcome = engine.calculate_booking_pricing_strict(request)
    assert isinstance(outcome, Priced)
    assert outcome.result == engine.calculate_booking_pricing(request)


# Reload

def test_reload_swaps_catalog(engine, catalog):
    replacement = Catalog(
        sessions=[SessionCatalogEntry(key='60min', duration_minutes=60, app_price=100, web_price=110, title='Reset')],
        addons=[AddonCatalogEntry(id='cupping', name='Cupping', price=5, duration_adjustment_minutes=5,
                                  available_for=('60min',))],
    )
    before = engine.calculate_booking_pricing(BookingPricingRequest(service_type='60min', selected_addons=['cupping']))

    engine.reload(replacement)

    after = engine.calculate_booking_pricing(BookingPricingRequest(service_type='60min', selected_addons=['cupping']))
    assert engine.catalog is replacement
    assert before.total_price == 165
    assert after.total_price == 115
    assert engine.get_session_price('90min') == 0
    # The replaced catalog object is untouched
    assert catalog.sessions['90min'].web_price == 190


def test_reload_from_settings(engine, catalog):
    reloaded = engine.reload()
    assert reloaded is not catalog
    assert reloaded.fingerprint == catalog.fingerprint
