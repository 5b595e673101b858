from unit_pricer.match import cheapest_alternative, choose_best, find_better_deals
from unit_pricer.models import Candidate, CatalogItem
from unit_pricer.normalize import normalize


def _cand(title="Nautica Voyage EDT (6.7 oz)", price=25.37, url="https://www.target.com/p/-/A-1"):
    return Candidate(title=title, url=url, price=price)


def test_prefers_candidate_with_unit_price():
    candidates = [
        _cand("Mystery Gift Set", 5.00, "https://www.target.com/p/-/A-1"),
        _cand("Nautica Voyage EDT (6.7 oz)", 25.37, "https://www.target.com/p/-/A-2"),
    ]
    result = choose_best(candidates)
    assert result is not None
    assert result.candidate.url.endswith("A-2")
    assert result.unit_price.unit_price == 3.79


def test_falls_back_to_first_priced():
    candidates = [
        _cand("Mystery Gift Set", None),
        _cand("Another Gift Set", 9.99),
    ]
    result = choose_best(candidates)
    assert result is not None
    assert result.candidate.title == "Another Gift Set"
    assert result.unit_price is None


def test_no_priced_candidates():
    assert choose_best([]) is None
    assert choose_best([_cand(price=None), _cand(price=0)]) is None


def test_cheapest_alternative_same_unit_only():
    current = normalize("Nautica Voyage EDT (6.7 oz)", 25.37)
    alts = [
        _cand("Davidoff Cool Water EDT 4.2 oz", 19.99),
        _cand("Nautica Voyage Cologne 3.4 oz", 9.99),
        _cand("Carlyle Melatonin (180 tablets)", 3.00),
        _cand("Cologne Sampler Set", 5.00),
    ]
    found = cheapest_alternative(current, alts)
    assert found is not None
    alt, up = found
    assert alt.title == "Nautica Voyage Cologne 3.4 oz"
    assert up.unit_price == 2.94


def test_no_cheaper_alternative():
    current = normalize("Nautica Voyage Cologne 3.4 oz", 9.99)
    assert cheapest_alternative(current, [_cand("Davidoff Cool Water EDT 4.2 oz", 19.99)]) is None
    assert cheapest_alternative(None, [_cand()]) is None
    assert cheapest_alternative(current, []) is None


def _catalog_item(id="19", name="Nautica Voyage EDT (6.7 oz)", subscribe=None, one_time=None):
    return CatalogItem(id=id, name=name, subscribe_price=subscribe, one_time_price=one_time)


def test_better_deals_only_cheaper_offers():
    catalog = [_catalog_item(subscribe=20.0, one_time=24.0)]
    offers = {
        "19": {
            "Target": _cand("Nautica Voyage EDT (6.7 oz)", 18.0, "https://www.target.com/p/-/A-1"),
            "walmart": _cand("Nautica Voyage EDT (6.7 oz)", 21.0, "https://www.walmart.com/ip/1"),
            "costco": _cand("Nautica Voyage EDT (6.7 oz)", 20.0, "https://www.costco.com/1"),
        }
    }
    (deal,) = find_better_deals(catalog, offers)
    assert deal.store == "target"
    assert deal.item_id == "19"
    assert deal.catalog_price == 20.0
    assert deal.competitor_price == 18.0
    assert deal.savings == 2.0
    assert deal.savings_pct == 10
    assert deal.competitor_unit_price == "$2.69/oz"


def test_better_deals_catalog_price_falls_back_to_one_time():
    catalog = [_catalog_item(one_time=25.37)]
    (deal,) = find_better_deals(catalog, {"19": {"target": _cand(price=20.0)}})
    assert deal.catalog_price == 25.37
    assert deal.savings == 5.37


def test_better_deals_rounding_is_half_up():
    catalog = [_catalog_item("1", "Widget A", subscribe=8.0), _catalog_item("2", "Widget B", subscribe=8.0)]
    offers = {
        "1": {"target": _cand("Widget A", 7.875)},
        "2": {"target": _cand("Widget B", 7.0)},
    }
    deals = {d.item_id: d for d in find_better_deals(catalog, offers)}
    assert deals["1"].savings == 0.13
    assert deals["1"].savings_pct == 2
    assert deals["1"].competitor_unit_price == ""
    assert deals["2"].savings == 1.0
    assert deals["2"].savings_pct == 13


def test_better_deals_biggest_savings_first():
    catalog = [
        _catalog_item("1", "Small", subscribe=10.0),
        _catalog_item("2", "Big", subscribe=50.0),
        _catalog_item("3", "Medium", subscribe=30.0),
    ]
    offers = {
        "1": {"target": _cand("Small", 9.0)},
        "2": {"target": _cand("Big", 40.0), "walmart": _cand("Big", 46.0)},
        "3": {"target": _cand("Medium", 25.0)},
    }
    deals = find_better_deals(catalog, offers)
    assert [(d.item_name, d.store, d.savings) for d in deals] == [
        ("Big", "target", 10.0),
        ("Medium", "target", 5.0),
        ("Big", "walmart", 4.0),
        ("Small", "target", 1.0),
    ]


def test_better_deals_skips_unusable_entries():
    catalog = [_catalog_item("1", "Priced", subscribe=10.0), _catalog_item("2", "Unpriced")]
    offers = {
        "1": {
            "target": _cand("Priced", 5.0, url=""),
            "walmart": _cand("Priced", None),
            "costco": _cand("Priced", 0),
        },
        "2": {"target": _cand("Unpriced", 1.0)},
        "404": {"target": _cand("Unknown", 1.0)},
    }
    assert find_better_deals(catalog, offers) == []


def test_better_deals_store_filter_ignores_case():
    catalog = [_catalog_item(subscribe=30.0)]
    offers = {"19": {"Target": _cand(price=25.0), "walmart": _cand(price=20.0)}}
    (deal,) = find_better_deals(catalog, offers, store="TARGET")
    assert deal.store == "target"
    assert deal.competitor_price == 25.0
