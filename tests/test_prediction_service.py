"""
Tests for probing the model endpoint across paths and body shapes
"""
import httpx
import pytest

from gateway.core.config import settings
from gateway.core.errors import UpstreamTransportError
from gateway.services.prediction_service import ATTEMPTS, PredictionService

BASE = "http://model.test"
FEATURES = {"procedure_area": 1200, "rooms": 3}
MISS = (422, {"detail": "unexpected payload"})


def test_attempt_order():
    assert [(a.path, a.shape) for a in ATTEMPTS] == [
        ("/predict", "plain"), ("/predict", "data"), ("/predict", "data_list"),
        ("/", "plain"), ("/", "data"), ("/", "data_list"),
    ]


@pytest.mark.asyncio
async def test_stops_at_first_shape_that_answers(upstream):
    model = upstream([MISS, MISS, MISS, (200, {"prediction": 800})])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch(FEATURES)

    assert model.calls == [
        ("/predict", FEATURES),
        ("/predict", {"data": FEATURES}),
        ("/predict", {"data": [FEATURES]}),
        ("/", FEATURES),
    ]
    assert result.status == 200
    assert result.raw_response == {"prediction": 800}
    assert result.predicted_price_raw == 800
    assert result.predicted_price == 960_000
    assert result.used_rule == "per_sqm"


@pytest.mark.asyncio
async def test_first_attempt_success_makes_one_call(upstream):
    model = upstream([(201, {"outputs": {"predicted_price": "3,000,000"}})])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch({})

    assert len(model.calls) == 1
    assert result.status == 201
    assert result.predicted_price_raw == 3_000_000
    assert result.used_rule == "raw"
    assert result.predicted_price == result.predicted_price_raw


@pytest.mark.asyncio
async def test_all_shapes_miss_then_one_final_call(upstream):
    model = upstream([MISS] * 6 + [(500, {"error": "model offline"})])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch(FEATURES)

    assert len(model.calls) == 7
    assert model.calls[-1] == ("/predict", FEATURES)
    assert result.status == 500
    assert result.raw_response == {"error": "model offline"}
    assert result.predicted_price_raw is None
    assert result.predicted_price is None
    assert result.used_rule is None


@pytest.mark.asyncio
async def test_final_call_can_still_answer(upstream):
    model = upstream([MISS] * 6 + [(200, {"value": 12.5})])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch({"procedure_area": 1000})

    assert len(model.calls) == 7
    assert result.predicted_price_raw == 12.5
    assert result.used_rule == "exp_per_sqm"


@pytest.mark.asyncio
async def test_final_call_can_be_disabled(upstream, monkeypatch):
    monkeypatch.setattr(settings, "PREDICT_FINAL_ATTEMPT", False)
    model = upstream([MISS] * 5 + [(404, {"detail": "Not Found"})])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch(FEATURES)

    assert len(model.calls) == 6
    assert result.status == 404
    assert result.used_rule is None


@pytest.mark.asyncio
async def test_unparsable_body_counts_as_miss(upstream):
    model = upstream([(200, "1,234"), (200, {"value": "525,000"})])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch({})

    assert len(model.calls) == 2
    assert result.predicted_price_raw == 525_000


@pytest.mark.asyncio
async def test_unparsable_body_is_reported_raw(upstream):
    model = upstream([(502, "<html>Bad Gateway</html>")])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch({})

    assert len(model.calls) == 7
    assert result.status == 502
    assert result.raw_response == {"raw": "<html>Bad Gateway</html>"}
    assert result.predicted_price is None


@pytest.mark.asyncio
async def test_empty_body_reads_as_empty_document(upstream):
    model = upstream([(204, "")])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch({})

    assert result.raw_response == {}
    assert result.predicted_price is None


@pytest.mark.asyncio
async def test_transport_error_aborts_dispatch():
    calls = []

    def refuse(request):
        calls.append(request.url.path)
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    svc = PredictionService(base_url=BASE, client=client)

    with pytest.raises(UpstreamTransportError) as err:
        await svc.dispatch(FEATURES)

    assert calls == ["/predict"]
    assert "connection refused" in str(err.value)


@pytest.mark.asyncio
async def test_timeout_is_a_transport_error():
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(slow))
    svc = PredictionService(base_url=BASE, client=client)

    with pytest.raises(UpstreamTransportError):
        await svc.dispatch({})


@pytest.mark.asyncio
async def test_trailing_slash_in_base_url(upstream):
    model = upstream([(200, {"price": 750_000})])
    svc = PredictionService(base_url=BASE + "/", client=model.client())

    await svc.dispatch({})

    assert model.calls[0][0] == "/predict"


@pytest.mark.asyncio
async def test_oversized_integer_in_reply_is_skipped(upstream):
    body = '{"price": 1' + "0" * 400 + ', "rooms": 3}'
    model = upstream([(200, body)])
    svc = PredictionService(base_url=BASE, client=model.client())

    result = await svc.dispatch({})

    assert len(model.calls) == 1
    assert result.predicted_price_raw == 3
