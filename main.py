from flask import Flask, request, jsonify
from flask_cors import CORS
from priceiq import ScenarioProcessor
from priceiq.presets import REGION_CHOICES, get_presets_for_model
from priceiq.providers import list_providers
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the browser calculator calls the API directly)
CORS(app)

# Initialize the scenario processor
processor = ScenarioProcessor()


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "PriceIQ Fee Calculator API",
        "version": "1.0",
        "endpoints": {
            "quote": "/quote [POST]",
            "compare": "/compare [POST]",
            "providers": "/providers [GET]",
            "presets": "/presets [GET]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/providers", methods=["GET"])
def providers():
    """Provider fee models with their products"""
    return jsonify({
        "providers": [p.to_dict() for p in list_providers()],
        "regions": list(REGION_CHOICES)
    }), 200


@app.route("/presets", methods=["GET"])
def presets():
    """Built-in presets, optionally filtered by ?tag=cards|connect"""
    tag = request.args.get("tag")
    return jsonify({
        "presets": [p.to_dict() for p in get_presets_for_model(tag)]
    }), 200


@app.route("/quote", methods=["POST"])
def quote():
    """
    Quote a scenario and run every enabled analysis
    """
    try:
        # Get input data
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        # Log request
        if isinstance(input_data, dict):
            provider_id = input_data.get("provider_id") or input_data.get("providerId") or "default"
            product_id = input_data.get("product_id") or input_data.get("productId") or "default"
            logger.info(f"Processing quote: {provider_id}/{product_id}")

        result = processor.process_from_dict(input_data)

        logger.info(f"Quote processed successfully: {result['scenario_summary']['provider_id']}")

        return jsonify(result), 200

    except ValueError as e:
        # Rejected request shape
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


@app.route("/compare", methods=["POST"])
def compare():
    """
    Compare several scenarios side by side
    """
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        if not isinstance(input_data, dict):
            raise ValueError("Request body must be a JSON object")

        scenarios = input_data.get("scenarios")
        logger.info(f"Comparing {len(scenarios) if isinstance(scenarios, list) else 0} scenarios")

        rows = processor.compare(scenarios)

        return jsonify({"rows": rows}), 200

    except ValueError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
