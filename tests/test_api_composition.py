import json
import threading
import urllib.error
import urllib.request
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from distpatterns.api_composition import (
    Pricing,
    Product,
    Review,
    ServiceEndpoints,
    fetch_pricing,
    fetch_product,
    fetch_review,
    get_product_details,
    make_server,
)

BACKEND_DATA = {
    "/products/p1": {"id": "p1", "name": "Lamp", "extra": "ignored"},
    "/price/p1": {"id": "p1", "price": 19.5},
    "/reviews/p1": {"product_id": "p1", "rating": 4},
    "/products/bad": {"id": "bad", "name": "Broken"},
    "/price/bad": "not an object",
    "/reviews/bad": {"product_id": "bad", "rating": 1},
}


class _Backend(BaseHTTPRequestHandler):
    def do_GET(self):
        if self.path not in BACKEND_DATA:
            self.send_response(404)
            self.end_headers()
            return
        body = json.dumps(BACKEND_DATA[self.path]).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


def _serve(server):
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return thread


@pytest.fixture
def endpoints():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Backend)
    _serve(server)
    base = f"http://127.0.0.1:{server.server_address[1]}"
    yield ServiceEndpoints(
        product=f"{base}/products/",
        pricing=f"{base}/price/",
        review=f"{base}/reviews/",
        timeout=5.0,
    )
    server.shutdown()
    server.server_close()


@pytest.fixture
def composer(endpoints):
    server = make_server("127.0.0.1", 0, endpoints)
    _serve(server)
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def test_fetchers_decode_known_fields(endpoints):
    assert fetch_product(endpoints, "p1") == Product("p1", "Lamp")
    assert fetch_pricing(endpoints, "p1") == Pricing("p1", 19.5)
    assert fetch_review(endpoints, "p1") == Review("p1", 4)


def test_default_endpoints_match_service_paths():
    defaults = ServiceEndpoints()
    assert defaults.product == "http://product-service/products/"
    assert defaults.pricing == "http://pricing-service/price/"
    assert defaults.review == "http://review-service/reviews/"


def test_get_product_details_composes(endpoints):
    details = get_product_details(endpoints, "p1")
    assert details == {
        "product": {"id": "p1", "name": "Lamp"},
        "pricing": {"id": "p1", "price": 19.5},
        "review": {"product_id": "p1", "rating": 4},
    }


def test_non_object_response_is_an_error(endpoints):
    with pytest.raises(ValueError):
        fetch_pricing(endpoints, "bad")


def test_missing_backend_resource_raises(endpoints):
    with pytest.raises(urllib.error.HTTPError):
        fetch_product(endpoints, "missing")


def test_server_returns_composed_json(composer, endpoints):
    with urllib.request.urlopen(f"{composer}/product?id=p1", timeout=5) as response:
        assert response.status == 200
        assert response.headers["Content-Type"] == "application/json"
        body = json.load(response)
    assert body == get_product_details(endpoints, "p1")


def test_server_reports_backend_failure_as_500(composer):
    with pytest.raises(urllib.error.HTTPError) as info:
        urllib.request.urlopen(f"{composer}/product?id=bad", timeout=5)
    assert info.value.code == 500
    assert info.value.read().endswith(b"\n")


def test_server_unknown_path_is_404(composer):
    with pytest.raises(urllib.error.HTTPError) as info:
        urllib.request.urlopen(f"{composer}/other", timeout=5)
    assert info.value.code == 404