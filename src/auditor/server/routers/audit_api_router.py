import logging
from flask import Blueprint, jsonify, request, current_app

from auditor.model import ViolationType
from auditor.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)

audit_api_router = Blueprint('audit_api_router', __name__)


# --- HELPER FUNCTION ---

def get_audit_service():
    """Retrieves the audit service from the Flask application context."""
    service = current_app.config.get('AUDIT_SERVICE')
    if not service:
        raise RuntimeError("AuditService is not set in app.config['AUDIT_SERVICE']")
    return service


# --- API ROUTES ---

@audit_api_router.route('/audit-website', methods=['POST'])
def audit_website():
    """
    Audits the copy of the website in the JSON body: {"url": "..."}.
    The content-sparse outcome is a normal 200 response with success=false.
    """
    body = request.get_json(silent=True) or {}
    raw_url = body.get('url') if isinstance(body, dict) else None

    try:
        response, status = get_audit_service().audit_site(raw_url)
    except Exception as e:
        logger.error(f"Error in audit-website API: {e}", exc_info=True)
        return jsonify({"success": False, "message": "Failed to audit website"}), 500

    return jsonify(response.to_wire()), status


@audit_api_router.route('/debug-html', methods=['POST'])
def debug_html():
    """
    Reports the raw structure of one page (element counts, text samples)
    to show what the crawler actually receives. Body: {"url": "..."}.
    """
    body = request.get_json(silent=True) or {}
    raw_url = body.get('url') if isinstance(body, dict) else None

    try:
        payload, status = get_audit_service().inspect_html(raw_url)
    except Exception as e:
        logger.error(f"Error in debug-html API: {e}", exc_info=True)
        return jsonify({"error": str(e) or "Unknown error"}), 500

    return jsonify(payload), status


@audit_api_router.route('/rules', methods=['GET'])
def list_rules():
    """Lists the registered rules and the violation types each one can emit."""
    RuleRegistry.discover()
    rules = [
        {
            "name": definition.name,
            "description": definition.description,
            "types": [t.value for t in definition.types],
        }
        for definition in RuleRegistry.get_definitions()
    ]
    return jsonify({
        "rules": rules,
        "taxonomy": [t.value for t in ViolationType],
        "produced": [t.value for t in RuleRegistry.get_produced_types()],
    })


@audit_api_router.route('/health', methods=['GET'])
def health():
    return jsonify({"status": "ok"})
