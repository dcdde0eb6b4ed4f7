from turnover_sla.models import (
    DEFAULT_STATUS_MATCHERS,
    FieldMapping,
    FiltersConfig,
    MonthBasis,
    RulesConfig,
)


def test_field_mapping_from_loose_dict():
    m = FieldMapping.from_dict({
        "order_date": "Column1.order_date",
        "status": "  ",
        "method": 12,
        "bogus": "x",
    })
    assert m.order_date == "Column1.order_date"
    assert m.status is None
    assert m.method is None
    assert m.column_for("bogus") is None
    assert m.is_mapped("order_date") and not m.is_mapped("product")
    assert FieldMapping.from_dict(None) == FieldMapping()


def test_rules_defaults_and_camel_case():
    assert RulesConfig().status_matchers == DEFAULT_STATUS_MATCHERS
    r = RulesConfig.from_dict(
        {"excludeChina": False, "statusMatchers": ["done"], "statusRegex": "ok$"})
    assert r == RulesConfig(exclude_china=False,
                            status_matchers=("done",), status_regex="ok$")
    assert RulesConfig.from_dict({"exclude_china": "yes"}).exclude_china is True
    assert RulesConfig.from_dict({"statusRegex": None}).status_regex == ""


def test_filters_fail_soft():
    f = FiltersConfig.from_dict({
        "methods": ["Air"],
        "products": "not-a-list",
        "monthRange": ["2024-01", None],
        "deliveryNotRequired": "true",
        "monthBasis": "bogus",
    })
    assert f.methods == ("Air",)
    assert f.products == ()
    assert f.month_range == ("2024-01", None)
    assert f.delivery_not_required is False
    assert f.month_basis is MonthBasis.SHIPPED


def test_filters_round_trip_and_basis_override():
    f = FiltersConfig(methods=("Sea",), month_basis=MonthBasis.SLA_DUE)
    assert FiltersConfig.from_dict(f.to_dict()) == f
    assert f.with_month_basis("order").month_basis is MonthBasis.ORDER
    assert f.with_month_basis("nope").month_basis is MonthBasis.SLA_DUE
