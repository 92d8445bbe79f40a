"""
CopyAudit - API Server
Flask application exposing the website copy audit over HTTP.
"""

import logging
from typing import Any, Dict, Optional

from flask import Flask

from auditor.server.routers.audit_api_router import audit_api_router
from copyaudit.core.audit_service import AuditService

logger = logging.getLogger(__name__)


def create_app(config: Optional[Dict[str, Any]] = None, audit_service: Optional[AuditService] = None) -> Flask:
    """
    Application factory to initialize the Flask instance with its audit service.
    """
    flask_app = Flask(__name__)

    # The service holds collaborators only; every request is an independent run
    flask_app.config['AUDIT_SERVICE'] = audit_service or AuditService()
    flask_app.json.sort_keys = False
    if config:
        flask_app.config.update(config)

    flask_app.register_blueprint(audit_api_router, url_prefix='/api')
    logger.debug("Flask app created with routes: %s", [str(r) for r in flask_app.url_map.iter_rules()])

    return flask_app


def run_server(host: str, port: int, debug: bool = False) -> None:
    app = create_app()

    print("\n" + "=" * 50)
    print("🚀  COPYAUDIT API")
    print("=" * 50)
    print(f"📡  Listening on:        http://{host}:{port}")
    print(f"🌍  Host Browser Access: http://localhost:{port}")
    print("-" * 50)

    print("\n🔍 API ROUTE MAPPING:")
    for rule in app.url_map.iter_rules():
        if "api" in str(rule):
            print(f"   ✅ {rule}")
    print("-" * 50 + "\n")

    # use_reloader=False prevents double-initialization of the app
    app.run(debug=debug, host=host, port=port, use_reloader=False)
