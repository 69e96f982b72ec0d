"""Tests for AWS Lambda handler."""

import base64
import json

from lambda_handler import lambda_handler


class TestLambdaHandler:
    """Test the Lambda handler routes and responses."""

    def test_health_check(self):
        """GET /health returns healthy status."""
        event = {"httpMethod": "GET", "path": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "healthy"

    def test_api_info(self):
        """GET /api returns API information."""
        event = {"httpMethod": "GET", "path": "/api"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "ok"
        assert "quote" in body["endpoints"]

    def test_cors_preflight(self):
        """OPTIONS requests return CORS headers."""
        event = {"httpMethod": "OPTIONS", "path": "/quote"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert "Access-Control-Allow-Origin" in response["headers"]
        assert "Access-Control-Allow-Methods" in response["headers"]

    def test_not_found(self):
        """Unknown paths return 404."""
        event = {"httpMethod": "GET", "path": "/unknown"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 404
        assert json.loads(response["body"])["path"] == "/unknown"

    def test_providers(self):
        """GET /providers lists every fee model and region."""
        event = {"httpMethod": "GET", "path": "/providers"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert [p["id"] for p in body["providers"]] == ["stripe", "paypal", "adyen", "checkoutcom", "custom"]
        assert [r["id"] for r in body["regions"]] == ["UK", "EU", "US"]

    def test_presets_filtered_by_tag(self):
        """GET /presets?tag=connect returns the connect presets."""
        event = {"httpMethod": "GET", "path": "/presets", "queryStringParameters": {"tag": "connect"}}
        response = lambda_handler(event, None)

        body = json.loads(response["body"])
        assert len(body["presets"]) == 4
        assert all(p["tag"] == "connect" for p in body["presets"])

    def test_presets_without_query(self):
        event = {"httpMethod": "GET", "path": "/presets", "queryStringParameters": None}
        body = json.loads(lambda_handler(event, None)["body"])
        assert len(body["presets"]) == 8

    def test_quote_success(self):
        """POST /quote quotes a valid scenario."""
        payload = {"providerId": "stripe", "region": "UK", "amount": 10}

        event = {"httpMethod": "POST", "path": "/quote", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["quote"]["net_before_vat"] == 9.65
        assert "fee_breakdown" in body

    def test_quote_base64_body(self):
        """API Gateway may base64-encode the body."""
        raw = json.dumps({"amount": 10}).encode("utf-8")
        event = {
            "httpMethod": "POST",
            "path": "/quote",
            "body": base64.b64encode(raw).decode("ascii"),
            "isBase64Encoded": True,
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["quote"]["provider_fee"] == 0.35

    def test_quote_empty_body(self):
        """POST /quote with empty body returns 400."""
        event = {"httpMethod": "POST", "path": "/quote", "body": ""}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "error" in body

    def test_quote_invalid_json(self):
        """POST /quote with invalid JSON returns 400."""
        event = {"httpMethod": "POST", "path": "/quote", "body": "not valid json"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "Invalid JSON" in body["error"]

    def test_quote_validation_error(self):
        """POST /quote with a non-object body returns 400."""
        event = {"httpMethod": "POST", "path": "/quote", "body": json.dumps([{"amount": 10}])}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "validation_failed"

    def test_unsolvable_quote_is_not_an_error(self):
        payload = {"mode": "reverse", "fx_percent": 60, "platform_fee_percent": 40}
        event = {"httpMethod": "POST", "path": "/quote", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["quote"]["denom_ok"] is False

    def test_compare(self):
        """POST /compare returns one row per scenario."""
        payload = {"scenarios": [{"provider_id": "stripe"}, {"provider_id": "adyen"}]}
        event = {"httpMethod": "POST", "path": "/compare", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        rows = json.loads(response["body"])["rows"]
        assert len(rows) == 2
        assert rows[1]["delta_net"] == 0.0

    def test_compare_requires_list(self):
        payload = {"scenarios": "stripe"}
        event = {"httpMethod": "POST", "path": "/compare", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["status"] == "validation_failed"

    def test_http_api_format(self):
        """Supports HTTP API v2 event format."""
        event = {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
