"""Flask JSON API for playing in the browser."""

import json
import queue
import threading
from typing import Optional

from flask import Flask, jsonify, request, Response

from .config import GameConfig
from .store import KeyValueStore, JsonFileStore, load_history
from .scheduler import Scheduler, ThreadingScheduler
from .shell import GameShell


def _sse_event(data: dict, event: str = "message") -> str:
    """Format a Server-Sent Event string."""
    payload = json.dumps(data)
    return f"event: {event}\ndata: {payload}\n\n"


def _json_body() -> dict:
    """Request JSON object; anything else (missing, array, scalar) reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _bad_request(message: str):
    return jsonify({"error": message}), 400


def create_app(
    config: Optional[GameConfig] = None,
    store: Optional[KeyValueStore] = None,
    scheduler: Optional[Scheduler] = None,
) -> Flask:
    config = config or GameConfig.from_env()
    store = store if store is not None else JsonFileStore(config.data_dir)
    scheduler = scheduler or ThreadingScheduler()
    # Timer callbacks and request handlers share this lock.
    lock = getattr(scheduler, "lock", None) or threading.RLock()

    shell = GameShell(config=config, scheduler=scheduler, store=store)
    subscribers: list[queue.Queue] = []

    def broadcast(event, engine):
        snapshot = shell.snapshot()
        for q in list(subscribers):
            q.put((event, snapshot))

    shell.engine.subscribe(broadcast)

    app = Flask(__name__)
    app.extensions["rps_shell"] = shell

    def state_response():
        return jsonify(shell.snapshot())

    @app.route("/api/state")
    def api_state():
        with lock:
            return state_response()

    @app.route("/api/move", methods=["POST"])
    def api_move():
        data = _json_body()
        player = data.get("player", 1)
        if player not in (1, 2):
            return _bad_request("player must be 1 or 2")
        try:
            with lock:
                accepted = shell.engine.submit_move(player, data.get("move"))
                return jsonify({"accepted": accepted, "state": shell.snapshot()})
        except ValueError:
            return _bad_request("move must be one of rock, paper, scissors")

    @app.route("/api/undo", methods=["POST"])
    def api_undo():
        with lock:
            accepted = shell.engine.undo_last_round()
            return jsonify({"accepted": accepted, "state": shell.snapshot()})

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        with lock:
            shell.engine.reset_game()
            return state_response()

    @app.route("/api/pause", methods=["POST"])
    def api_pause():
        with lock:
            shell.engine.toggle_pause()
            return state_response()

    @app.route("/api/mode", methods=["POST"])
    def api_mode():
        data = _json_body()
        try:
            with lock:
                if "mode" in data:
                    shell.set_mode(data["mode"])
                else:
                    shell.toggle_mode()
                return state_response()
        except ValueError:
            return _bad_request("mode must be 'single' or 'multi'")

    @app.route("/api/difficulty", methods=["POST"])
    def api_difficulty():
        data = _json_body()
        try:
            with lock:
                shell.set_difficulty(data.get("difficulty"))
                return state_response()
        except ValueError:
            return _bad_request("difficulty must be one of easy, medium, hard")

    @app.route("/api/theme", methods=["POST"])
    def api_theme():
        with lock:
            shell.toggle_theme()
            return jsonify({"theme": shell.theme, "palette": shell.theme_palette()})

    @app.route("/api/leaderboard")
    def api_leaderboard():
        with lock:
            return jsonify(shell.leaderboard().to_dict())

    @app.route("/api/history")
    def api_history():
        with lock:
            return jsonify([r.to_dict() for r in load_history(store)])

    @app.route("/api/events")
    def api_events():
        """SSE endpoint that streams a state snapshot after every change."""

        def generate():
            q = queue.Queue()
            with lock:
                subscribers.append(q)
                initial = shell.snapshot()
            try:
                yield _sse_event(initial, event="state")
                while True:
                    try:
                        event, snapshot = q.get(timeout=15)
                    except queue.Empty:
                        yield ": keepalive\n\n"
                        continue
                    yield _sse_event(dict(snapshot, event=event), event="state")
            finally:
                with lock:
                    if q in subscribers:
                        subscribers.remove(q)

        return Response(
            generate(),
            mimetype="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "X-Accel-Buffering": "no",
                "Connection": "keep-alive",
            },
        )

    return app


def main(host: str = "127.0.0.1", port: int = 5000, debug: bool = False, config=None):
    app = create_app(config=config)
    print("\n🎮 Rock-Paper-Scissors Web API")
    print(f"  → http://{host}:{port}/api/state\n")
    # The reloader would start a second engine with its own timers.
    app.run(host=host, port=port, debug=debug, use_reloader=False, threaded=True)


if __name__ == "__main__":
    main()
