import base64
import logging
import os

from flask import Flask, current_app, render_template, request
from flask import session as tab_session

from yaps_dashboard.backend.api_server import init_app, proxy_bp
from yaps_dashboard.client import YapsClient
from yaps_dashboard.config import MAX_USERS, Settings, load_settings
from yaps_dashboard.dashboard import DashboardState
from yaps_dashboard.models import SERIES_COLORS, YapsData
from yaps_dashboard.reporting.report_generator import CHART_KINDS, ReportGenerator


logger = logging.getLogger("yaps.web")


def _chart_uris(state: DashboardState):
    """Inline PNG data URIs for each chart kind."""
    charts = {}
    if not state.has_results:
        return charts
    generator = ReportGenerator()
    for kind in CHART_KINDS:
        png = generator.render_chart(state.results, kind)
        charts[kind] = "data:image/png;base64," + base64.b64encode(png).decode("ascii")
    return charts


def _restore(state: DashboardState) -> None:
    """Put back records loaded on an earlier request for the same inputs."""
    saved = tab_session.get("yaps_results", {})
    for index, name in enumerate(state.usernames):
        if name in saved:
            state.results[index] = YapsData.from_json(saved[name])


def _save(state: DashboardState) -> None:
    tab_session["yaps_results"] = {
        state.usernames[index]: record.to_dict() for index, record in state.loaded()
    }


def home():
    usernames = request.args.getlist("username")[:MAX_USERS] or [""]
    state = DashboardState(current_app.config["YAPS_CLIENT"], usernames)
    _restore(state)

    remove = request.args.get("remove", type=int)
    if remove is not None:
        state.remove_user_input(remove)
    if request.args.get("add"):
        state.add_user_input()

    if request.args.get("analyze") and state.can_submit:
        state.submit()
    _save(state)

    return render_template(
        "index.html",
        state=state,
        colors=SERIES_COLORS,
        charts=_chart_uris(state),
        max_users=MAX_USERS,
    )


def create_web_app(settings: Settings = None, client=None, session=None) -> Flask:
    """Web dashboard plus the proxy route at /api/yaps."""
    settings = settings or load_settings()
    app = Flask(__name__)
    init_app(app, settings, session)
    # Loaded records live in the signed session cookie between requests
    app.config["SECRET_KEY"] = settings.secret_key or os.urandom(24)
    app.config["YAPS_CLIENT"] = client or YapsClient(
        settings.api_url, session=session, timeout=settings.request_timeout
    )
    app.add_url_rule("/", "home", home)
    app.register_blueprint(proxy_bp, url_prefix="/api")
    logger.info(f"Web dashboard using {settings.api_url}")
    return app


if __name__ == '__main__':
    settings = load_settings()
    create_web_app(settings).run(debug=True, host=settings.host, port=settings.port)
