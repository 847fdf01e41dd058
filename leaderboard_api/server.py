import logging
from typing import Any

from flask import Blueprint, Flask, jsonify, request, send_from_directory

from .auth import basic_auth_guard
from .config import Settings
from .errors import LeaderboardError
from .store import JsonFileStorage, LeaderboardStore

log = logging.getLogger(__name__)

GAME_PAGE = "speed-typing-game.html"
ADMIN_PAGE = "admin.html"


def _json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _where(store: LeaderboardStore, tier: str | None, preposition: str) -> str:
    return f" {preposition} {tier}" if store.tiered else ""


def build_admin_blueprint(settings: Settings, store: LeaderboardStore) -> Blueprint:
    admin = Blueprint("admin", __name__, url_prefix="/admin")

    if settings.admin_auth:
        if not (settings.admin_user and settings.admin_pass):
            log.warning("ADMIN_USER/ADMIN_PASS not set; every admin request will be rejected")
        admin.before_request(basic_auth_guard(settings.admin_user, settings.admin_pass, settings.admin_realm))

    @admin.get("")
    def admin_page():
        return send_from_directory(settings.public_dir, ADMIN_PAGE)

    @admin.get("/api")
    def admin_leaderboard():
        return jsonify(store.get_ranking(request.args.get("difficulty")))

    @admin.delete("/player/<path:name>")
    def delete_player(name: str):
        tier = request.args.get("difficulty")
        name = store.admin_delete_player(name, tier)
        return jsonify({"success": True, "message": f"Player {name} removed{_where(store, tier, 'from')}"})

    @admin.put("/player/<path:name>")
    def set_player_score(name: str):
        tier = request.args.get("difficulty")
        score = _json_body().get("score")
        name = store.admin_set_score(name, score, tier)
        return jsonify({"success": True, "message": f"Player {name} score updated to {score}{_where(store, tier, 'in')}"})

    @admin.delete("/reset")
    def reset_tier():
        tier = request.args.get("difficulty")
        store.admin_reset_tier(tier)
        if store.tiered:
            return jsonify({"success": True, "message": f"Leaderboard for {tier} reset"})
        return jsonify({"success": True, "message": "Leaderboard reset"})

    @admin.delete("/wipe")
    def wipe_all():
        store.admin_wipe_all()
        return jsonify({"success": True, "message": "All leaderboards wiped"})

    return admin


def create_app(settings: Settings | None = None, store: LeaderboardStore | None = None) -> Flask:
    settings = settings or Settings.from_env()
    if store is None:
        store = LeaderboardStore(JsonFileStorage(settings.leaderboard_file), settings.tiers)

    app = Flask(__name__, static_folder=None)
    app.config["LEADERBOARD_SETTINGS"] = settings
    app.extensions["leaderboard_store"] = store

    @app.errorhandler(LeaderboardError)
    def handle_leaderboard_error(exc: LeaderboardError):
        return jsonify({"error": exc.message}), exc.status_code

    @app.get("/")
    def game_page():
        return send_from_directory(settings.public_dir, GAME_PAGE)

    @app.post("/score")
    def post_score():
        body = _json_body()
        store.submit_score(body.get("name"), body.get("score"), request.args.get("difficulty"))
        return jsonify({"success": True})

    @app.get("/leaderboard")
    def get_leaderboard():
        return jsonify(store.get_ranking(request.args.get("difficulty")))

    @app.get("/difficulties")
    def get_difficulties():
        return jsonify(list(store.tiers))

    app.register_blueprint(build_admin_blueprint(settings, store))
    return app


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    app = create_app(settings)
    log.info(
        "Server running on http://%s:%s (tiers: %s, admin auth: %s)",
        settings.host,
        settings.port,
        ", ".join(settings.tiers) or "off",
        "on" if settings.admin_auth else "off",
    )
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
