# tests/test_logic.py
import pytest
from datetime import date
from nyumba.errors import ConflictError, NotFoundError, ValidationError
from nyumba.models import Property, UnitCategory, Unit, Tenant, Payment
from nyumba.services import portfolio
from nyumba.services.accounting import tenant_balance, cumulative_arrears
from nyumba.services.reports import rent_roll_report, arrears_report, vacancy_report
from nyumba.services.dashboard import (
    dashboard_stats, property_stats, property_summaries, monthly_income_trend,
)

# The 'demo_portfolio' fixture seeds the demo data inside the per-test transaction.

AS_OF = date(2023, 10, 15)


def tenant_named(name):
    return Tenant.query.filter_by(name=name).one()


def property_named(name):
    return Property.query.filter_by(name=name).one()


# --- Helper function for setting up test data ---
def setup_property_unit(db_session, prop_name="T1", rent=10000, unit_num="U1"):
    prop = Property(name=prop_name, location="Test")
    cat = UnitCategory(property=prop, name="1 Bedroom", rent=rent)
    unit = Unit(category=cat, unit_number=unit_num)
    db_session.add_all([prop, cat, unit])
    db_session.commit()
    return prop, cat, unit


# --- Per-tenant balances ---

def test_cumulative_arrears_from_move_in(demo_portfolio):
    """Alice: Jan-Oct billed at 25000, Sep and Oct paid."""
    alice = tenant_named("Alice Smith")
    assert cumulative_arrears(alice, AS_OF) == 10 * 25000 - 50000


def test_cumulative_arrears_never_negative(db_session):
    prop, cat, unit = setup_property_unit(db_session)
    tenant = Tenant(unit=unit, name="Pre Payer", phone="0700000000", email="pp@example.com",
                    move_in_date=date(2024, 1, 1))
    tenant.payments.append(Payment(amount=10000, payment_date=date(2024, 1, 1), month_paid_for="2024-01"))
    db_session.add(tenant)
    db_session.commit()

    assert cumulative_arrears(tenant, date(2024, 1, 20)) == 0
    assert cumulative_arrears(tenant, date(2023, 12, 31)) == 0  # before move-in


def test_tenant_balance_only_credits_billed_months(demo_portfolio):
    """A payment for September does not reduce an October-only balance."""
    alice = tenant_named("Alice Smith")
    bal = tenant_balance(alice, date(2023, 10, 1), date(2023, 10, 31))
    assert bal.months == ["2023-10"]
    assert bal.billed == 25000
    assert bal.paid == 25000
    assert bal.balance == 0
    assert bal.property.name == "KICC Apartments"


def test_tenant_balance_prorated_move_in_month(db_session):
    prop, cat, unit = setup_property_unit(db_session, rent=31000)
    tenant = Tenant(unit=unit, name="Mid Month", phone="0700000001", email="mm@example.com",
                    move_in_date=date(2024, 1, 11))
    db_session.add(tenant)
    db_session.commit()

    prorated = tenant_balance(tenant, date(2024, 1, 1), date(2024, 2, 29), prorate=True)
    assert prorated.billed == 21000 + 31000
    full = tenant_balance(tenant, date(2024, 1, 1), date(2024, 2, 29), prorate=False)
    assert full.billed == 62000


def test_moved_out_tenant_is_not_billed_after_move_out(demo_portfolio):
    diana = tenant_named("Diana Prince")
    portfolio.unassign_tenant(diana.id, date(2023, 9, 1))
    bal = tenant_balance(diana, date(2023, 8, 1), date(2023, 10, 31))
    assert bal.months == ["2023-08"]
    assert bal.billed == 40000


# --- Reports ---

def test_rent_roll_for_single_month(demo_portfolio):
    kicc = property_named("KICC Apartments")
    report = rent_roll_report(kicc.id, date(2023, 10, 1), date(2023, 10, 31))
    assert [r["unit_number"] for r in report] == ["A1", "A3", "B1", "B2"]
    diana = [r for r in report if r["tenant_name"] == "Diana Prince"][0]
    assert diana["monthly_rent"] == 40000
    assert diana["expected_rent"] == 40000
    assert diana["amount_paid"] == 20000
    assert diana["balance"] == 20000


def test_rent_roll_expected_spans_period(demo_portfolio):
    report = rent_roll_report("all", date(2023, 9, 1), date(2023, 10, 31))
    ethan = [r for r in report if r["tenant_name"] == "Ethan Hunt"][0]
    assert ethan["property_name"] == "Westlands Heights"
    assert ethan["expected_rent"] == 36000
    assert ethan["amount_paid"] == 18000
    assert ethan["balance"] == 18000


def test_arrears_report_single_month_lists_only_debtors(demo_portfolio):
    kicc = property_named("KICC Apartments")
    report = arrears_report(kicc.id, date(2023, 10, 1), date(2023, 10, 31))
    assert report == [{
        "tenant_id": tenant_named("Diana Prince").id,
        "tenant_name": "Diana Prince",
        "property_name": "KICC Apartments",
        "unit_number": "B2",
        "total_billed": 40000,
        "total_paid": 20000,
        "arrears": 20000,
    }]


def test_arrears_report_all_properties_over_two_months(demo_portfolio):
    report = arrears_report("all", date(2023, 9, 1), date(2023, 10, 31))
    arrears = {r["tenant_name"]: r["arrears"] for r in report}
    assert arrears == {
        "Bob Johnson": 25000,
        "Charlie Brown": 40000,
        "Diana Prince": 60000,
        "Ethan Hunt": 18000,
    }


def test_arrears_report_skips_tenants_moving_in_after_period(demo_portfolio):
    report = arrears_report("all", date(2023, 1, 1), date(2023, 4, 30))
    names = {r["tenant_name"] for r in report}
    assert "Charlie Brown" not in names  # moved in May
    assert "Ethan Hunt" not in names     # moved in August
    assert {"Alice Smith", "Bob Johnson", "Diana Prince"} <= names


def test_reports_for_unknown_property_are_empty(demo_portfolio):
    assert rent_roll_report(9999, date(2023, 10, 1), date(2023, 10, 31)) == []
    assert arrears_report(9999, date(2023, 10, 1), date(2023, 10, 31)) == []
    assert vacancy_report(9999) == []


def test_vacancy_report(demo_portfolio):
    report = vacancy_report("all")
    assert report == [
        {"property_name": "KICC Apartments", "unit_number": "A2", "category_name": "1 Bedroom", "monthly_rent": 25000},
        {"property_name": "Westlands Heights", "unit_number": "S1", "category_name": "Studio", "monthly_rent": 18000},
    ]


def test_vacancy_report_includes_unit_after_move_out(demo_portfolio):
    portfolio.unassign_tenant(tenant_named("Diana Prince").id, date(2023, 10, 15))
    kicc = property_named("KICC Apartments")
    assert [r["unit_number"] for r in vacancy_report(kicc.id)] == ["A2", "B2"]


# --- Dashboard aggregation ---

def test_dashboard_stats(demo_portfolio):
    stats = dashboard_stats(AS_OF)
    assert stats["total_units"] == 7
    assert stats["occupied_units"] == 5
    assert stats["vacant_units"] == 2
    assert stats["occupancy_rate"] == pytest.approx(71.43, abs=0.01)
    assert stats["expected_income"] == 148000
    assert stats["actual_income"] == 110000
    # Alice 200000, Bob 275000, Charlie 200000, Diana 340000, Ethan 36000
    assert stats["total_arrears"] == 1051000
    assert stats["month"] == "2023-10"


def test_dashboard_stats_empty_portfolio(db_session):
    stats = dashboard_stats(AS_OF)
    assert stats["occupancy_rate"] == 0.0
    assert stats["total_units"] == 0
    assert stats["total_arrears"] == 0


def test_property_stats_and_summaries(demo_portfolio):
    kicc = property_named("KICC Apartments")
    stats = property_stats(kicc.id, AS_OF)
    assert stats == {
        "occupancy_rate": 80.0,
        "total_units": 5,
        "occupied_units": 4,
        "expected_income": 130000,
        "arrears": 1015000,
    }
    summaries = property_summaries(AS_OF)
    assert [(s["name"], s["occupancy_rate"], s["total_arrears"]) for s in summaries] == [
        ("KICC Apartments", 80.0, 1015000),
        ("Westlands Heights", 50.0, 36000),
    ]


def test_property_stats_unknown_property(db_session):
    with pytest.raises(NotFoundError):
        property_stats(12345, AS_OF)


def test_monthly_income_trend(demo_portfolio):
    trend = monthly_income_trend(date(2023, 10, 31), months=6)
    assert [t["month"] for t in trend] == ["2023-05", "2023-06", "2023-07", "2023-08", "2023-09", "2023-10"]
    assert [t["label"] for t in trend] == ["May", "Jun", "Jul", "Aug", "Sep", "Oct"]
    assert [t["expected"] for t in trend] == [130000, 130000, 130000, 148000, 148000, 148000]
    assert [t["actual"] for t in trend] == [0, 0, 0, 0, 43000, 110000]


def test_monthly_income_trend_keeps_former_tenants_until_move_out(demo_portfolio):
    portfolio.unassign_tenant(tenant_named("Diana Prince").id, date(2023, 10, 1))
    trend = monthly_income_trend(date(2023, 10, 31), months=2)
    assert [t["expected"] for t in trend] == [148000, 108000]


# --- Portfolio rules ---

def test_delete_category_with_units_is_refused(db_session):
    prop, cat, unit = setup_property_unit(db_session)
    with pytest.raises(ConflictError):
        portfolio.delete_category(cat.id)
    portfolio.delete_unit(unit.id)
    portfolio.delete_category(cat.id)
    assert UnitCategory.query.count() == 0


def test_occupied_unit_cannot_be_edited_or_deleted(db_session):
    prop, cat, unit = setup_property_unit(db_session)
    portfolio.assign_tenant(unit.id, "Ann Lee", "0700000002", "ann@example.com", date(2024, 1, 1))
    with pytest.raises(ConflictError):
        portfolio.update_unit(unit.id, "U9")
    with pytest.raises(ConflictError):
        portfolio.delete_unit(unit.id)


def test_assign_to_occupied_unit_is_refused(db_session):
    prop, cat, unit = setup_property_unit(db_session)
    portfolio.assign_tenant(unit.id, "Ann Lee", "0700000002", "ann@example.com", date(2024, 1, 1))
    with pytest.raises(ConflictError, match="already occupied"):
        portfolio.assign_tenant(unit.id, "Ben Ode", "0700000003", "ben@example.com", date(2024, 2, 1))


def test_new_tenancy_cannot_start_before_previous_move_out(db_session):
    prop, cat, unit = setup_property_unit(db_session)
    first = portfolio.assign_tenant(unit.id, "Ann Lee", "0700000002", "ann@example.com", date(2024, 1, 1))
    portfolio.unassign_tenant(first.id, date(2024, 3, 15))
    with pytest.raises(ConflictError):
        portfolio.assign_tenant(unit.id, "Ben Ode", "0700000003", "ben@example.com", date(2024, 3, 1))
    second = portfolio.assign_tenant(unit.id, "Ben Ode", "0700000003", "ben@example.com", date(2024, 3, 15))
    assert unit.current_tenant.id == second.id


def test_unassign_rules(db_session):
    prop, cat, unit = setup_property_unit(db_session)
    tenant = portfolio.assign_tenant(unit.id, "Ann Lee", "0700000002", "ann@example.com", date(2024, 2, 1))
    with pytest.raises(ValidationError):
        portfolio.unassign_tenant(tenant.id, date(2024, 1, 31))
    portfolio.unassign_tenant(tenant.id, date(2024, 5, 31))
    with pytest.raises(ConflictError):
        portfolio.unassign_tenant(tenant.id, date(2024, 6, 1))
    # Tenant record and history survive the move-out
    assert db_session.get(Tenant, tenant.id).move_out_date == date(2024, 5, 31)


def test_bulk_units(db_session):
    prop, cat, unit = setup_property_unit(db_session, unit_num="C1")
    with pytest.raises(ConflictError):
        portfolio.create_bulk_units(cat.id, "C", 1, 3)
    units = portfolio.create_bulk_units(cat.id, "C", 2, 4)
    assert [u.unit_number for u in units] == ["C2", "C3", "C4"]
    with pytest.raises(ValidationError):
        portfolio.create_bulk_units(cat.id, "D", 5, 1)
    with pytest.raises(ValidationError):
        portfolio.create_bulk_units(cat.id, "D", 1, 101)


def test_bulk_assignment_reports_failures(db_session):
    prop, cat, unit = setup_property_unit(db_session, unit_num="E1")
    portfolio.create_bulk_units(cat.id, "E", 2, 3)
    rows = [
        {"unit_number": "E1", "name": "Ann Lee", "phone": "0700000002", "email": "ann@example.com", "move_in_date": "2024-01-01"},
        {"unit_number": "E1", "name": "Ben Ode", "phone": "0700000003", "email": "ben@example.com", "move_in_date": "2024-01-01"},
        {"unit_number": "E2", "name": "Cy Kim", "phone": "0700000004", "email": "", "move_in_date": "2024-01-01"},
        {"unit_number": "E9", "name": "Di Moe", "phone": "0700000005", "email": "di@example.com", "move_in_date": "2024-01-01"},
        {"unit_number": "E3", "name": "Ed Nye", "phone": "0700000006", "email": "ed@example.com", "move_in_date": "2024-02-01"},
    ]
    result = portfolio.assign_multiple_tenants(cat.id, rows)
    assert result["success"] == 2
    assert result["failed"] == 3
    assert len(result["errors"]) == 3
    assert "Row 2" in result["errors"][0]
    occupied = sorted(u.unit_number for u in cat.units if u.is_occupied)
    assert occupied == ["E1", "E3"]


def test_delete_property_cascades_to_tenants_and_payments(demo_portfolio):
    kicc = property_named("KICC Apartments")
    portfolio.delete_property(kicc.id)
    assert Property.query.count() == 1
    assert Tenant.query.count() == 1
    assert Payment.query.count() == 1  # Ethan's September payment


def test_record_payment_validates_month(db_session):
    prop, cat, unit = setup_property_unit(db_session)
    tenant = portfolio.assign_tenant(unit.id, "Ann Lee", "0700000002", "ann@example.com", date(2024, 1, 1))
    with pytest.raises(ValidationError):
        portfolio.record_payment(tenant.id, 5000, date(2024, 1, 5), "2024-1")
    portfolio.record_payment(tenant.id, 5000, date(2024, 1, 5), "2024-01")
    portfolio.record_payment(tenant.id, 5000, date(2024, 2, 5), "2024-02")
    history = portfolio.payments_for_tenant(tenant.id)
    assert [p.month_paid_for for p in history] == ["2024-02", "2024-01"]
    assert cumulative_arrears(tenant, date(2024, 2, 10)) == 10000


def test_prorate_setting_applies_to_reports(app, db_session, monkeypatch):
    prop, cat, unit = setup_property_unit(db_session, rent=31000)
    portfolio.assign_tenant(unit.id, "Mid Month", "0700000001", "mm@example.com", date(2024, 1, 11))

    report = rent_roll_report(prop.id, date(2024, 1, 1), date(2024, 1, 31))
    assert report[0]["expected_rent"] == 31000

    monkeypatch.setitem(app.config, 'PRORATE_MOVE_IN_MONTH', True)
    report = rent_roll_report(prop.id, date(2024, 1, 1), date(2024, 1, 31))
    assert report[0]["expected_rent"] == 21000
    assert cumulative_arrears(Tenant.query.one(), date(2024, 2, 10)) == 21000 + 31000
