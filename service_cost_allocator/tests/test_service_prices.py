import pytest

from service_cost_allocator.allocation import allocate_service_prices
from service_cost_allocator.errors import InsufficientDataError
from service_cost_allocator.models import Service


def test_service_prices_follow_weight_times_clients(make_client):
    services = [Service(name="GWS", weight=1), Service(name="Windows AD", weight=5), Service(name="Unused", weight=3)]
    clients = [
        make_client("A", services={"GWS": {"Use": 1}, "Windows AD": {"Use": 1}}).client,
        make_client("B", services={"GWS": {"Use": 1}, "Windows AD": {"Use": 0}}).client,
    ]

    prices = {p.name: p for p in allocate_service_prices(services, clients, 7000, 20)}

    assert prices["GWS"].clients_using == 2
    assert prices["GWS"].usage_weight == pytest.approx(2)
    assert prices["Windows AD"].usage_weight == pytest.approx(5)
    assert prices["GWS"].cost_allocation == pytest.approx(2000)
    assert prices["Windows AD"].calculated_price == pytest.approx(6000)
    assert prices["Unused"].calculated_price == 0.0
    assert sum(p.cost_allocation for p in prices.values()) == pytest.approx(7000)


def test_service_prices_require_some_usage(make_client):
    clients = [make_client("A").client]
    with pytest.raises(InsufficientDataError) as exc:
        allocate_service_prices([Service(name="GWS")], clients, 1000, 20)
    assert exc.value.reason == "no_weight"


def test_service_prices_require_costs(make_client):
    clients = [make_client("A", services={"GWS": {"Use": 1}}).client]
    with pytest.raises(InsufficientDataError):
        allocate_service_prices([Service(name="GWS")], clients, 0, 20)
