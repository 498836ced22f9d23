import logging
import traceback

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from ioio.config import ApiConfig, load_api_config
from ioio.errors import ApiError, NotFoundError, StoreError, UnexpectedError, ValidationError
from ioio.kinds import PROPERTY, SERVICE
from ioio.store import build_store
from ioio.validation import build_record

api = Blueprint("api", __name__, url_prefix="/api")


def _store():
    return current_app.extensions["record_store"]


def _payload():
    # JSON bodies and url-encoded form posts are both accepted
    if request.is_json:
        data = request.get_json()
        if not isinstance(data, dict):
            raise TypeError("Request body must be a JSON object")
        return data
    return request.form.to_dict()


def _create(kind):
    try:
        payload = _payload()
        current_app.logger.info("Received %s data: %s", kind.name, payload)
        record = build_record(kind, payload)
        current_app.logger.info("Inserting %s: %s", kind.name, record)
        data = _store().insert(kind, record)
    except ValidationError:
        raise
    except StoreError as e:
        current_app.logger.error("Store error submitting %s: %s", kind.name, e.error)
        raise e.with_context(f"Error submitting {kind.name}") from e
    except Exception as e:
        current_app.logger.exception("Unexpected error inserting %s", kind.name)
        raise UnexpectedError(f"Unexpected error submitting {kind.name}", str(e)) from e

    return jsonify({"success": True, "message": f"{kind.title} submitted", "data": data}), 200


def _list(kind):
    try:
        data = _store().list(kind)
    except StoreError as e:
        current_app.logger.error("Store error fetching %s: %s", kind.plural, e.error)
        raise e.with_context(f"Error fetching {kind.plural}") from e
    except Exception as e:
        current_app.logger.exception("Unexpected error fetching %s", kind.plural)
        raise UnexpectedError(f"Unexpected error fetching {kind.plural}", str(e)) from e

    return jsonify({"success": True, "data": data or []}), 200


def _delete(kind, record_id):
    try:
        deleted = _store().delete(kind, record_id)
    except StoreError as e:
        current_app.logger.error("Store error deleting %s %s: %s", kind.name, record_id, e.error)
        raise e.with_context(f"Error deleting {kind.name}") from e
    except Exception as e:
        current_app.logger.exception("Unexpected error deleting %s %s", kind.name, record_id)
        raise UnexpectedError(f"Unexpected error deleting {kind.name}", str(e)) from e

    if not deleted:
        raise NotFoundError(f"{kind.title} not found")
    current_app.logger.info("Deleted %s %s", kind.name, record_id)
    return jsonify({"success": True, "message": f"{kind.title} {record_id} deleted"}), 200


# Routes
@api.route("/health", methods=["GET"])
def health():
    return jsonify({"success": True, "message": "IOIO Backend is running!"})


@api.route("/properties", methods=["POST"])
def create_property():
    return _create(PROPERTY)


@api.route("/properties", methods=["GET"])
def get_properties():
    return _list(PROPERTY)


@api.route("/properties/<int:record_id>", methods=["DELETE"])
def delete_property(record_id):
    return _delete(PROPERTY, record_id)


@api.route("/service", methods=["POST"])
def create_service():
    return _create(SERVICE)


@api.route("/service", methods=["GET"])
def get_services():
    return _list(SERVICE)


@api.route("/service/<int:record_id>", methods=["DELETE"])
def delete_service(record_id):
    return _delete(SERVICE, record_id)


def handle_api_error(e):
    return jsonify(e.to_dict()), e.status_code


def handle_http_error(e):
    if e.code == 500:
        current_app.logger.error("Server error occurred:\n%s", traceback.format_exc())
    return jsonify({"success": False, "message": e.description}), e.code


def create_app(config: ApiConfig, store=None) -> Flask:
    """Build the Submission API.

    ``store`` overrides the backend chosen from ``config.store``; the
    store is created once and shared by every request.
    """
    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": config.cors_origins}})

    app.extensions["record_store"] = store if store is not None else build_store(app, config.store)

    app.register_blueprint(api)
    app.register_error_handler(ApiError, handle_api_error)
    app.register_error_handler(HTTPException, handle_http_error)
    return app


def main():
    logging.basicConfig(level=logging.INFO)
    config = load_api_config()
    app = create_app(config)
    app.run(host="0.0.0.0", port=config.port, debug=config.debug)


if __name__ == "__main__":
    main()
