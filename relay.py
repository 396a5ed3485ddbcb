"""
Relay server for the lot analysis web UI.

Browsers cannot call most city GIS / listing APIs directly (no CORS
headers), so the UI goes through this relay:
- GET  /proxy?url=...   fetch upstream JSON and return it verbatim
- GET  /health          liveness check
- POST /api/analyze     run the lot analysis on posted properties
"""

import logging
import sys
from typing import Optional

import requests
from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from config import Settings, get_settings
from rate_limiter import RequestThrottle, throttled
from zoning import AnalysisConfig, LotAnalyzer, Property
from zoning.export import to_record

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def fetch_json(url: str, timeout: float):
    """Fetch a URL and decode its JSON body."""
    response = requests.get(url, timeout=timeout)
    return response.json()


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the relay Flask app."""
    settings = settings or get_settings()

    app = Flask(__name__)
    origins = settings.allowed_origins
    if origins == ["*"]:
        CORS(app, origins="*", send_wildcard=True)
    else:
        CORS(app, origins=origins)

    throttle = RequestThrottle(settings.gis_requests_per_minute)
    app.extensions["request_throttle"] = throttle
    fetch = throttled(fetch_json, throttle=throttle)

    analyzer = LotAnalyzer(max_workers=settings.analysis_max_workers)

    @app.route("/proxy", methods=["GET"])
    def proxy() -> tuple[Response, int]:
        """Forward a GET to the url query parameter and relay the JSON body."""
        target_url = request.args.get("url")
        if not target_url:
            return jsonify({"error": "URL parameter is required"}), 400

        logger.info(f"Proxying request to: {target_url}")
        try:
            data = fetch(target_url, settings.relay_timeout_seconds)
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Proxy error: {e}")
            return jsonify({"error": "Failed to fetch data"}), 500

        return jsonify(data), 200

    @app.route("/health", methods=["GET"])
    def health_check() -> tuple[Response, int]:
        """Health check endpoint."""
        return jsonify({"status": "Proxy server is running"}), 200

    @app.route("/api/analyze", methods=["POST"])
    def analyze() -> tuple[Response, int]:
        """Analyze posted properties and return ranked flat records."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("properties"), list):
            return jsonify({"error": "Body must be JSON with a 'properties' list"}), 400

        config = AnalysisConfig.from_mapping(data.get("config"), settings)

        properties = []
        rejected = 0
        for raw in data["properties"]:
            try:
                properties.append(Property.from_dict(raw))
            except (TypeError, ValueError, KeyError, AttributeError) as e:
                logger.warning(f"Rejected property payload: {e}")
                rejected += 1

        results = analyzer.analyze_batch(properties, config)
        return jsonify({
            "count": len(results),
            "skipped": len(data["properties"]) - len(results),
            "rejected": rejected,
            "results": [
                {**to_record(r), "Screening": r.screening_flags, "Reasons": r.feasibility.reasons}
                for r in results
            ],
        }), 200

    return app


def main():
    """Run the relay server."""
    settings = get_settings()
    setup_logging(settings)
    app = create_app(settings)
    logger.info(f"Proxy server running on http://{settings.relay_host}:{settings.relay_port}")
    logger.info(f"Use http://{settings.relay_host}:{settings.relay_port}/proxy?url=YOUR_ENCODED_URL")
    app.run(host=settings.relay_host, port=settings.relay_port)


if __name__ == "__main__":
    main()
