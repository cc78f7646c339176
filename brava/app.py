import logging

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix  # safe behind proxies

from brava import config
from brava.routes.analysis import analysis_bp
from brava.routes.consultation import consultation_bp
from brava.routes.dashboard import dashboard_bp
from brava.routes.live import live_bp
from brava.routes.profile import profile_bp
from brava.routes.reports import reports_bp
from brava.routes.scans import scans_bp


def configure_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(test_config: dict | None = None):
    configure_logging()
    app = Flask(__name__, static_folder="static", template_folder="templates")

    # Keep JSON keys in the order the routes build them
    app.json.sort_keys = False
    if test_config:
        app.config.update(test_config)

    # Respect X-Forwarded-* when behind a proxy/load balancer
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)

    # Blueprints
    app.register_blueprint(dashboard_bp, url_prefix="/")
    app.register_blueprint(live_bp, url_prefix="/api/dashboard")
    app.register_blueprint(analysis_bp, url_prefix="/api/analysis")
    app.register_blueprint(scans_bp, url_prefix="/api/scans")
    app.register_blueprint(reports_bp, url_prefix="/api/reports")
    app.register_blueprint(consultation_bp, url_prefix="/api/consultation")
    app.register_blueprint(profile_bp, url_prefix="/api")

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=8080, debug=True)
