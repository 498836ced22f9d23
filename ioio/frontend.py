"""Static site server.

Serves the marketing pages, forwards ``/api/*`` to the Submission API so
browser code can use relative URLs, and hosts the dashboard.
"""

import logging
import os

import requests
from flask import Flask, Response, jsonify, request, send_from_directory

from ioio.config import SiteConfig, load_site_config
from ioio.dashboard import SubmissionClient, register_dashboard

logger = logging.getLogger(__name__)

SITE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

# Connection-scoped headers that must not be forwarded by a proxy
HOP_BY_HOP = {
    "connection", "keep-alive", "proxy-authenticate", "proxy-authorization",
    "te", "trailers", "transfer-encoding", "upgrade",
}
# requests already decoded the body, so its framing headers no longer apply
STRIPPED_RESPONSE = HOP_BY_HOP | {"content-encoding", "content-length"}


def _forward_headers():
    return {
        key: value for key, value in request.headers.items()
        if key.lower() not in HOP_BY_HOP and key.lower() != "host"
    }


def proxy_api(path, backend_url):
    url = f"{backend_url}/api/{path}"
    # Raw query string keeps repeated keys and their order
    if request.query_string:
        url = f"{url}?{request.query_string.decode('latin-1')}"
    try:
        upstream = requests.request(
            request.method,
            url,
            data=request.get_data(),
            headers=_forward_headers(),
            allow_redirects=False,
        )
    except requests.RequestException as e:
        logger.error("Proxy to %s failed: %s", url, e)
        return jsonify({"success": False, "message": "Backend unavailable", "error": str(e)}), 502

    headers = [
        (key, value) for key, value in upstream.headers.items()
        if key.lower() not in STRIPPED_RESPONSE
    ]
    return Response(upstream.content, status=upstream.status_code, headers=headers)


def create_site_app(config: SiteConfig, site_dir: str = SITE_DIR, client=None) -> Flask:
    app = Flask(__name__, static_folder=None)
    app.config['SECRET_KEY'] = config.secret_key

    register_dashboard(app, client or SubmissionClient(config.backend_url))

    @app.route('/api/', defaults={'path': ''},
               methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS', 'HEAD'])
    @app.route('/api/<path:path>',
               methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS', 'HEAD'])
    def api(path):
        return proxy_api(path, config.backend_url)

    # Serve index.html for all unmatched routes (for SPA)
    @app.route('/', defaults={'path': ''})
    @app.route('/<path:path>')
    def site(path):
        if path and os.path.isfile(os.path.join(site_dir, path)):
            return send_from_directory(site_dir, path)
        return send_from_directory(site_dir, 'index.html')

    logger.info("Proxying API requests to: %s", config.backend_url)
    return app


def main():
    logging.basicConfig(level=logging.INFO)
    config = load_site_config()
    app = create_site_app(config)
    app.run(host="0.0.0.0", port=config.port, debug=config.debug)


if __name__ == "__main__":
    main()
