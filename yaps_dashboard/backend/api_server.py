from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

from yaps_dashboard.backend.proxy import forward_yaps, preflight
from yaps_dashboard.config import Settings, load_settings


proxy_bp = Blueprint("yaps_proxy", __name__)


@proxy_bp.route("/yaps", methods=["GET", "OPTIONS"])
def yaps():
    if request.method == "OPTIONS":
        result = preflight()
        return "", result.status_code, result.headers

    settings = current_app.config["YAPS_SETTINGS"]
    result = forward_yaps(
        request.args.get("username"),
        session=current_app.config.get("YAPS_SESSION"),
        upstream_url=settings.upstream_url,
        timeout=settings.request_timeout,
    )
    return jsonify(result.body), result.status_code, result.headers


def init_app(app: Flask, settings: Settings = None, session=None) -> None:
    """Attach settings, CORS and the health route shared by both apps."""
    app.config["YAPS_SETTINGS"] = settings or load_settings()
    app.config["YAPS_SESSION"] = session
    # Views that set their own CORS headers are left alone; this covers the rest
    CORS(app, send_wildcard=True, allow_headers=["Content-Type"],
         methods=["GET", "POST", "OPTIONS"])
    app.add_url_rule("/health", "health", lambda: "alive")


def create_app(settings: Settings = None, session=None) -> Flask:
    """Proxy app serving both the function path and the dev-proxy path."""
    app = Flask(__name__)
    init_app(app, settings, session)
    app.register_blueprint(proxy_bp)
    app.register_blueprint(proxy_bp, url_prefix="/api", name="yaps_proxy_api")
    return app


if __name__ == '__main__':
    settings = load_settings()
    print(f"Starting proxy on port {settings.port}...")
    create_app(settings).run(host=settings.host, port=settings.port)
