"""
AI chat blueprint — proxies chat completions to Cloudflare Workers AI.

Endpoint:
    POST /api/ai/chat   {messages: [{role, content}, ...]}

Responses:
    200  upstream JSON, unchanged
    400  {"error": "messages[] required"}
    500  {"error": "Missing Cloudflare Credentials", "details", "isConfigError": true}
    500  {"error": "Cloudflare Workers AI request failed", "details": <upstream body>}
    500  {"error": "Unexpected error", "details": <message>}
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from safety_vitals.integrations.workers_ai_gateway import CHAT_ROLES, workers_ai_gateway

logger = logging.getLogger(__name__)

ai_bp = Blueprint("ai", __name__, url_prefix="/api/ai")


def _invalid_messages(messages) -> str | None:
    for index, msg in enumerate(messages):
        if not isinstance(msg, dict):
            return f"messages[{index}] must be an object"
        if msg.get("role") not in CHAT_ROLES:
            return f"messages[{index}].role must be one of {', '.join(CHAT_ROLES)}"
        if not isinstance(msg.get("content"), str):
            return f"messages[{index}].content must be a string"
    return None


@ai_bp.route("/chat", methods=["POST"])
def chat():
    try:
        body = request.get_json(silent=True) or {}
        messages = body.get("messages") if isinstance(body, dict) else None
        if not isinstance(messages, list) or not messages:
            return jsonify({"error": "messages[] required"}), 400
        problem = _invalid_messages(messages)
        if problem:
            return jsonify({"error": problem}), 400

        cfg = current_app.config
        account_id = cfg.get("CLOUDFLARE_ACCOUNT_ID")
        api_token = cfg.get("CLOUDFLARE_API_TOKEN")
        logger.debug("AI chat credentials: has_account=%s has_token=%s",
                     bool(account_id), bool(api_token))
        if not account_id or not api_token:
            return jsonify({
                "error": "Missing Cloudflare Credentials",
                "details": "CLOUDFLARE_ACCOUNT_ID or CLOUDFLARE_API_TOKEN is not set in environment variables.",
                "isConfigError": True,
            }), 500

        result = workers_ai_gateway.run(
            messages,
            account_id=account_id,
            api_token=api_token,
            model=cfg.get("WORKERS_AI_MODEL") or "@cf/meta/llama-3-8b-instruct",
            timeout=cfg.get("WORKERS_AI_TIMEOUT", 60),
        )
        if not result.ok:
            logger.error("Workers AI returned status=%s", result.status_code)
            return jsonify({
                "error": "Cloudflare Workers AI request failed",
                "details": result.data,
            }), 500

        return jsonify(result.data)
    except Exception as e:
        logger.exception("AI chat failed")
        return jsonify({"error": "Unexpected error", "details": str(e)}), 500
