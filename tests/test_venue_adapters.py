import pytest
import requests

from opskins_manager.core.errors import RemoteCallError
from opskins_manager.venue.opskins import OpskinsVenue


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


@pytest.fixture
def recorded(monkeypatch):
    calls = []
    responses = []

    def fake_request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        return responses.pop(0)

    monkeypatch.setattr(requests, "request", fake_request)
    return calls, responses


def _venue():
    return OpskinsVenue("SECRET", base_url="https://api.example.test/", timeout=3.0)


def test_get_inventory_maps_items(recorded):
    calls, responses = recorded
    responses.append(
        FakeResponse(body={"status": 1, "response": {"items": [
            {"id": 11, "name": "A", "appid": 730, "contextid": 2, "sku": 1}
        ]}})
    )
    items = _venue().get_inventory()
    assert [(i.id, i.name) for i in items] == [(11, "A")]
    method, url, kwargs = calls[0]
    assert method == "GET"
    assert url == "https://api.example.test/IInventory/GetInventory/v2/"
    assert kwargs["auth"] == ("SECRET", "")
    assert kwargs["timeout"] == 3.0


def test_search_passes_query_and_coerces_amount(recorded):
    calls, responses = recorded
    responses.append(
        FakeResponse(body={"status": 1, "response": {"sales": [
            {"id": 1, "name": "A", "amount": "125"},
        ]}})
    )
    sales = _venue().search({"search_item": '"A"', "app": "730_2"})
    assert sales[0].amount == 125
    assert calls[0][2]["params"] == {"search_item": '"A"', "app": "730_2"}


def test_buy_items_posts_sale_ids(recorded):
    calls, responses = recorded
    responses.append(
        FakeResponse(body={"status": 1, "response": {"items": [
            {"saleid": 1, "new_itemid": 99, "name": "A", "bot_id": 4},
        ]}})
    )
    results = _venue().buy_items([1, 2], 250)
    assert results[0].new_itemid == 99 and results[0].bot_id == 4
    assert calls[0][0] == "POST"
    assert calls[0][2]["data"] == {"saleids": "1,2", "total": 250}


def test_withdraw_maps_offers(recorded):
    calls, responses = recorded
    responses.append(
        FakeResponse(body={"status": 1, "response": {"offers": [
            {"bot_id": 3, "tradeoffer_id": "777", "tradeoffer_error": None,
             "items": [{"id": 5}]},
        ]}})
    )
    offers = _venue().withdraw_inventory_items([5])
    assert offers[0].tradeoffer_id == "777"
    assert offers[0].items == [{"id": 5}]
    assert calls[0][2]["data"] == {"item_id": "5"}


def test_api_status_error_raises(recorded):
    _, responses = recorded
    responses.append(FakeResponse(body={"status": 2002, "message": "Not enough funds"}))
    with pytest.raises(RemoteCallError, match="Not enough funds"):
        _venue().buy_items([1], 100)


def test_http_error_raises_with_status(recorded):
    _, responses = recorded
    responses.append(FakeResponse(status_code=401, body={"message": "bad key"}))
    with pytest.raises(RemoteCallError) as exc:
        _venue().get_inventory()
    assert exc.value.status_code == 401


def test_non_json_body_raises(recorded):
    _, responses = recorded
    responses.append(FakeResponse(status_code=200, body=None, text="<html>"))
    with pytest.raises(RemoteCallError):
        _venue().get_inventory()


def test_transport_error_raises(monkeypatch):
    def timeout(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(requests, "request", timeout)
    with pytest.raises(RemoteCallError):
        _venue().get_inventory()


def test_malformed_sale_raises_remote_error(recorded):
    _, responses = recorded
    responses.append(
        FakeResponse(body={"status": 1, "response": {"sales": [
            {"id": 1, "name": "A", "amount": None},
        ]}})
    )
    with pytest.raises(RemoteCallError, match="malformed sale"):
        _venue().search({"search_item": '"A"', "app": "730_2"})
