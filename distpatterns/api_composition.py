"""API composition: combine product, pricing and review services into one view."""

from __future__ import annotations

import argparse
import json
import logging
import urllib.parse
import urllib.request
from dataclasses import asdict, dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceEndpoints:
    """Base URLs of the backing services; the product id is appended."""

    product: str = "http://product-service/products/"
    pricing: str = "http://pricing-service/price/"
    review: str = "http://review-service/reviews/"
    timeout: float = 10.0


@dataclass(frozen=True)
class Product:
    id: str = ""
    name: str = ""


@dataclass(frozen=True)
class Pricing:
    id: str = ""
    price: float = 0.0


@dataclass(frozen=True)
class Review:
    product_id: str = ""
    rating: int = 0


def _get_json(base: str, product_id: str, timeout: float) -> dict[str, Any]:
    url = base + urllib.parse.quote(product_id, safe="")
    with urllib.request.urlopen(url, timeout=timeout) as response:
        data = json.load(response)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object from {url}")
    return data


def _string(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _number(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {key!r} must be a number")
    return float(value)


def _integer(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    return value


def fetch_product(endpoints: ServiceEndpoints, product_id: str) -> Product:
    """Fetch a product from the product service."""
    data = _get_json(endpoints.product, product_id, endpoints.timeout)
    return Product(id=_string(data, "id"), name=_string(data, "name"))


def fetch_pricing(endpoints: ServiceEndpoints, product_id: str) -> Pricing:
    """Fetch a product's price from the pricing service."""
    data = _get_json(endpoints.pricing, product_id, endpoints.timeout)
    return Pricing(id=_string(data, "id"), price=_number(data, "price"))


def fetch_review(endpoints: ServiceEndpoints, product_id: str) -> Review:
    """Fetch a product's review from the review service."""
    data = _get_json(endpoints.review, product_id, endpoints.timeout)
    return Review(
        product_id=_string(data, "product_id"), rating=_integer(data, "rating")
    )


def get_product_details(endpoints: ServiceEndpoints, product_id: str) -> dict[str, Any]:
    """Query all three services and compose their answers into one document."""
    product = fetch_product(endpoints, product_id)
    pricing = fetch_pricing(endpoints, product_id)
    review = fetch_review(endpoints, product_id)
    return {
        "product": asdict(product),
        "pricing": asdict(pricing),
        "review": asdict(review),
    }


def make_server(
    host: str = "", port: int = 8080, endpoints: ServiceEndpoints | None = None
) -> ThreadingHTTPServer:
    """Create a server answering ``GET /product?id=...`` with composed details."""
    services = ServiceEndpoints() if endpoints is None else endpoints

    class Handler(BaseHTTPRequestHandler):
        def _send(self, status: int, content_type: str, body: bytes) -> None:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            if content_type.startswith("text/plain"):
                self.send_header("X-Content-Type-Options", "nosniff")
            self.end_headers()
            self.wfile.write(body)

        def do_GET(self) -> None:
            url = urllib.parse.urlsplit(self.path)
            if url.path != "/product":
                self._send(404, "text/plain; charset=utf-8", b"404 page not found\n")
                return
            query = urllib.parse.parse_qs(url.query)
            product_id = query.get("id", [""])[0]
            try:
                details = get_product_details(services, product_id)
            except (OSError, ValueError) as exc:
                self._send(
                    500, "text/plain; charset=utf-8", f"{exc}\n".encode("utf-8")
                )
                return
            body = (json.dumps(details) + "\n").encode("utf-8")
            self._send(200, "application/json", body)

        def log_message(self, format: str, *args: Any) -> None:
            logger.info("%s - %s", self.address_string(), format % args)

    return ThreadingHTTPServer((host, port), Handler)


def main(argv: list[str] | None = None) -> None:
    """Run the composition server."""
    defaults = ServiceEndpoints()
    parser = argparse.ArgumentParser(description="Product details composition server")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--product-url", default=defaults.product)
    parser.add_argument("--pricing-url", default=defaults.pricing)
    parser.add_argument("--review-url", default=defaults.review)
    args = parser.parse_args(argv)
    endpoints = ServiceEndpoints(args.product_url, args.pricing_url, args.review_url)
    with make_server(args.host, args.port, endpoints) as server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass