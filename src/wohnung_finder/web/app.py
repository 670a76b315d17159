"""REST API for managing searches and fetching their results."""

import logging
from typing import Mapping

from flask import Flask, jsonify, request

from ..models.listing import Criteria
from ..providers.base import BaseProvider
from ..services.scheduler import PollScheduler
from ..services.state_store import JsonStateStore

logger = logging.getLogger(__name__)


def create_app(
    store: JsonStateStore,
    scheduler: PollScheduler,
    registry: Mapping[str, BaseProvider],
) -> Flask:
    """
    Build the Flask app.

    Args:
        store: State store holding searches and seen sets
        scheduler: Used to run on-demand poll cycles
        registry: Provider registry, for listing providers and defaults
    """
    app = Flask(__name__)

    def not_found():
        return jsonify({"error": "not found"}), 404

    @app.route("/api/health")
    def health():
        return jsonify({"ok": True})

    @app.route("/api/providers")
    def providers():
        return jsonify([
            {"id": provider_id, "name": provider.display_name, "enabled": provider.enabled}
            for provider_id, provider in registry.items()
        ])

    @app.route("/api/searches", methods=["POST"])
    def create_search():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"error": "expected a JSON object"}), 400

        chosen = data.get("providers") or []
        unknown = [provider_id for provider_id in chosen if provider_id not in registry]
        if unknown:
            return jsonify({"error": f"unknown providers: {', '.join(unknown)}"}), 400

        search = store.create_search(
            criteria=Criteria.from_dict(data.get("criteria")),
            providers=chosen,
            email=(data.get("email") or "").strip() or None,
            default_providers=registry.keys(),
        )
        return jsonify(search.to_dict())

    @app.route("/api/searches", methods=["GET"])
    def list_searches():
        return jsonify([search.to_dict() for search in store.list_searches()])

    @app.route("/api/searches/<search_id>/toggle", methods=["POST"])
    def toggle_search(search_id):
        search = store.toggle_search(search_id)
        if search is None:
            return not_found()
        return jsonify(search.to_dict())

    @app.route("/api/searches/<search_id>/results")
    def search_results(search_id):
        search = store.get_search(search_id)
        if search is None:
            return not_found()
        result = scheduler.run_search(search)
        return jsonify(result.to_dict())

    return app
