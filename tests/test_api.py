"""HTTP integration tests using FastAPI TestClient."""

from starlette.testclient import TestClient

from power4 import config
from power4.main import app
from power4.session import session_manager


def play(client, columns, prefix="/api"):
    data = None
    for column in columns:
        resp = client.post(f"{prefix}/move", json={"column": column})
        assert resp.status_code == 200
        data = resp.json()
        assert data["accepted"] is True
    return data


class TestHttpIntegration:
    def test_health_endpoint(self):
        with TestClient(app) as client:
            resp = client.get("/health")
            assert resp.status_code == 200
            assert resp.json() == {"status": "ok"}

    def test_initial_game_sets_session_cookie(self):
        with TestClient(app) as client:
            resp = client.get("/api/game")
            assert resp.status_code == 200
            assert config.SESSION_COOKIE in resp.cookies
            data = resp.json()
            assert data["variant"] == "classic"
            assert (data["rows"], data["columns"]) == (6, 7)
            assert data["current_player"] == 1
            assert data["status"] == "ongoing"
            assert data["message"] == ""

    def test_move(self):
        with TestClient(app) as client:
            resp = client.post("/api/move", json={"column": 3})
            assert resp.status_code == 200
            data = resp.json()
            assert data["accepted"] is True
            assert data["row"] == 5
            assert data["snapshot"]["board"][5][3] == 1
            assert data["snapshot"]["current_player"] == 2

            # the cookie carries the same game into the next request
            state = client.get("/api/game").json()
            assert state["turn_count"] == 1

    def test_full_game_flow(self):
        """Player 1 stacks column 0 and wins, then a new game keeps the score."""
        with TestClient(app) as client:
            data = play(client, [0, 1, 0, 1, 0, 1, 0])
            snap = data["snapshot"]
            assert snap["status"] == "blue_wins"
            assert snap["game_over"] is True
            assert snap["winner"] == 1
            assert snap["show_result"] is True
            assert snap["message"] == "Player 1 wins!"
            assert snap["player1_score"] == 1

            resp = client.post("/api/move", json={"column": 4})
            assert resp.status_code == 200
            assert resp.json()["accepted"] is False
            assert resp.json()["reason"] == "Game is already over!"

            snap = client.post("/api/new-game").json()
            assert snap["status"] == "ongoing"
            assert snap["turn_count"] == 0
            assert snap["player1_score"] == 1

            snap = client.post("/api/reset-scores").json()
            assert snap["player1_score"] == 0

    def test_full_column_rejected(self):
        with TestClient(app) as client:
            play(client, [6] * 6)
            resp = client.post("/api/move", json={"column": 6})
            assert resp.status_code == 200
            data = resp.json()
            assert data["accepted"] is False
            assert data["reason"] == "Column is full! Try another column."
            assert data["snapshot"]["turn_count"] == 6

    def test_column_out_of_range(self):
        with TestClient(app) as client:
            resp = client.post("/api/move", json={"column": 7})
            assert resp.status_code == 400
            assert resp.json()["type"] == "error"
            assert "invalid column" in resp.json()["message"].lower()

    def test_malformed_column(self):
        with TestClient(app) as client:
            assert client.post("/api/move", json={"column": "abc"}).status_code == 422
            assert client.post("/api/move", json={"column": -1}).status_code == 422
            assert client.post("/api/move", json={}).status_code == 422

    def test_sessions_are_isolated(self):
        with TestClient(app) as alice, TestClient(app) as bob:
            play(alice, [2, 2, 2])
            assert bob.get("/api/game").json()["turn_count"] == 0
            assert alice.get("/api/game").json()["turn_count"] == 3

    def test_end_session(self):
        with TestClient(app) as client:
            play(client, [1])
            assert client.delete("/api/session").status_code == 204
            client.cookies.clear()
            assert client.get("/api/game").json()["turn_count"] == 0


class TestBonusHttp:
    def test_bonus_before_start(self):
        with TestClient(app) as client:
            resp = client.get("/api/bonus/game")
            assert resp.status_code == 404
            assert resp.json()["type"] == "error"
            assert client.post("/api/bonus/move", json={"column": 0}).status_code == 404

    def test_error_response_still_sets_session_cookie(self):
        with TestClient(app) as client:
            before = len(session_manager.sessions)
            resp = client.get("/api/bonus/game")
            assert resp.status_code == 404
            assert config.SESSION_COOKIE in resp.cookies

            for _ in range(4):
                assert client.get("/api/bonus/game").status_code == 404
            assert len(session_manager.sessions) == before + 1

    def test_bonus_redirects_to_game(self):
        with TestClient(app) as client:
            resp = client.get("/api/bonus", follow_redirects=False)
            assert resp.status_code == 303
            assert resp.headers["location"] == "/api/bonus/game"

    def test_start_game_clamps_settings(self):
        with TestClient(app) as client:
            resp = client.post(
                "/api/bonus/start-game",
                json={"player1": "Alice", "player2": "  ", "rows": 20, "columns": 2},
            )
            assert resp.status_code == 200
            data = resp.json()
            assert data["variant"] == "bonus"
            assert (data["rows"], data["columns"]) == (15, 4)
            assert data["player1_name"] == "Alice"
            assert data["player2_name"] == "Player 2"

    def test_start_game_defaults(self):
        with TestClient(app) as client:
            data = client.post("/api/bonus/start-game").json()
            assert (data["rows"], data["columns"]) == (6, 7)
            assert data["player1_name"] == "Player 1"

    def test_gravity_flips_after_five_moves(self):
        with TestClient(app) as client:
            client.post("/api/bonus/start-game", json={"player1": "Alice", "player2": "Bob"})
            data = play(client, [0, 1, 0, 1, 0], prefix="/api/bonus")
            assert data["snapshot"]["inverse_gravity"] is True
            assert "inverse gravity" in data["snapshot"]["message"].lower()

            data = play(client, [4], prefix="/api/bonus")
            assert data["row"] == 0
            assert data["snapshot"]["board"][0][4] == 2

            snap = client.post("/api/bonus/new-game").json()
            assert snap["inverse_gravity"] is False
            assert snap["player1_name"] == "Alice"

    def test_bonus_win_and_reset_scores(self):
        with TestClient(app) as client:
            client.post(
                "/api/bonus/start-game",
                json={"player1": "Alice", "player2": "Bob", "rows": 4, "columns": 5},
            )
            data = play(client, [3, 3, 3, 3, 0, 0, 4, 1, 4, 2], prefix="/api/bonus")
            assert data["snapshot"]["winner_name"] == "Bob"
            assert data["snapshot"]["player2_score"] == 1

            snap = client.post("/api/bonus/reset-scores").json()
            assert snap["player2_score"] == 0
            assert snap["status"] == "red_wins"

    def test_classic_and_bonus_are_separate(self):
        with TestClient(app) as client:
            client.post("/api/bonus/start-game")
            play(client, [0, 1], prefix="/api/bonus")
            assert client.get("/api/game").json()["turn_count"] == 0
            assert client.get("/api/bonus/game").json()["turn_count"] == 2
