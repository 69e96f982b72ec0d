"""
AWS Lambda handler for the PriceIQ Fee Calculator API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging
import os

from priceiq import ScenarioProcessor
from priceiq.presets import REGION_CHOICES, get_presets_for_model
from priceiq.providers import list_providers

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Initialize processor (reused across warm invocations)
processor = ScenarioProcessor()

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - GET /providers
    - GET /presets
    - POST /quote
    - POST /compare
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    # Route to appropriate handler
    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    elif path == "/providers" and http_method == "GET":
        return handle_providers()
    elif path == "/presets" and http_method == "GET":
        return handle_presets(event)
    elif path == "/quote" and http_method == "POST":
        return handle_quote(event)
    elif path == "/compare" and http_method == "POST":
        return handle_compare(event)
    else:
        return _response(404, {"error": "Not found", "path": path})


def _response(status_code, payload):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(payload)}


def _parse_body(event):
    """Return the decoded JSON body, or None when the body is empty."""
    body = event.get("body", "")
    if not isinstance(body, str):
        return body
    if not body:
        return None
    # Handle base64 encoded body (API Gateway)
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return json.loads(body)


def handle_health():
    """Health check endpoint."""
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """API information endpoint."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "PriceIQ Fee Calculator API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {
                "quote": "/quote [POST]",
                "compare": "/compare [POST]",
                "providers": "/providers [GET]",
                "presets": "/presets [GET]",
                "health": "/health [GET]",
            },
        },
    )


def handle_providers():
    """Provider fee models with their products."""
    return _response(
        200,
        {"providers": [p.to_dict() for p in list_providers()], "regions": list(REGION_CHOICES)},
    )


def handle_presets(event):
    """Built-in presets, optionally filtered by the `tag` query parameter."""
    params = event.get("queryStringParameters") or {}
    return _response(200, {"presets": [p.to_dict() for p in get_presets_for_model(params.get("tag"))]})


def handle_quote(event):
    """Quote a scenario and run every enabled analysis."""
    return _handle_post(event, _quote)


def handle_compare(event):
    """Compare several scenarios side by side."""
    return _handle_post(event, _compare)


def _quote(input_data):
    provider_id = product_id = "default"
    if isinstance(input_data, dict):
        provider_id = input_data.get("provider_id") or input_data.get("providerId") or provider_id
        product_id = input_data.get("product_id") or input_data.get("productId") or product_id
    logger.info(f"Processing quote: {provider_id}/{product_id}")

    result = processor.process_from_dict(input_data)

    logger.info(f"Quote processed successfully: {result['scenario_summary']['provider_id']}")
    return result


def _compare(input_data):
    if not isinstance(input_data, dict):
        raise ValueError("Request body must be a JSON object")
    scenarios = input_data.get("scenarios")
    logger.info(f"Comparing {len(scenarios) if isinstance(scenarios, list) else 0} scenarios")
    return {"rows": processor.compare(scenarios)}


def _handle_post(event, handler):
    try:
        input_data = _parse_body(event)
        if not input_data:
            return _response(400, {"error": "No input data provided", "status": "failed"})

        return _response(200, handler(input_data))

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        # Rejected request shapes (body not an object, scenarios not a list, etc.)
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(
            500, {"error": "An unexpected error occurred during processing", "status": "failed"}
        )
