"""
Dungeon Mini - FastAPI Web Server

This module exposes one game session over HTTP.
It provides:
1. A read-only view of the session and world map.
2. An endpoint that runs one command line per request.
3. A reset endpoint that starts a fresh game.
"""

import threading

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from Dungeon import GameSession, SessionSignal, load_settings
from Dungeon.config import GameSettings
from Dungeon.logging_config import configure_logging

# --- Application Setup ---

app = FastAPI(title="Dungeon Mini Interface")


class CommandRequest(BaseModel):
    line: str = Field(description="One command line, e.g. 'move north'")


# --- Session Management ---

class SessionManager:
    """
    Manages the lifecycle of the single game session served by this process.
    Acts as a bridge between the engine and the FastAPI application.
    """

    # Commands still accepted after the game has ended.
    TERMINAL_COMMANDS = {"load", "scores", "help"}

    def __init__(self, settings: GameSettings | None = None):
        self.settings = settings
        self.session: GameSession | None = None
        self.turn = 0
        # Sync endpoints run in a thread pool; one command at a time touches the state.
        self.lock = threading.Lock()

    def initialize(self):
        if self.settings is None:
            self.settings = load_settings()
            configure_logging(self.settings.log_level, self.settings.log_file)
        self.session = GameSession(self.settings)
        self.turn = 0

    def get_state_dict(self) -> dict:
        """
        Gathers the current session data in a format suitable for JSON serialization.
        """
        with self.lock:
            if self.session is None:
                self.initialize()
            state = self.session.state
            return {
                "state": state.snapshot(),
                "room": state.current.describe(),
                "map": state.game.get_map_info(),
                "turn": self.turn,
                "complete": not state.is_running,
            }

    def execute(self, line: str) -> dict:
        """
        Runs one command line against the session.
        Once the game is over only a few commands (e.g. load) are accepted.
        """
        with self.lock:
            if self.session is None:
                self.initialize()

            state = self.session.state
            command = line.strip().split(" ", 1)[0].lower()
            if not state.is_running and command not in self.TERMINAL_COMMANDS:
                raise HTTPException(
                    status_code=409,
                    detail=f"The game has ended ({state.status.value}). Load a save or reset.",
                )

            result = self.session.handle(line)
            if result.command is not None:
                self.turn += 1

            payload = result.to_dict()
            payload["turn"] = self.turn
            payload["score"] = self.session.state.score
            payload["complete"] = result.signal != SessionSignal.RUNNING
            return payload

    def reset(self):
        with self.lock:
            self.initialize()


# Global singleton for the served session
manager = SessionManager()


# --- API Endpoints ---

@app.get("/api/state")
def get_state():
    """Returns the current state of the session."""
    return JSONResponse(manager.get_state_dict())


@app.post("/api/command")
def run_command(request: CommandRequest):
    """Runs one command line and returns its output and the session signal."""
    return JSONResponse(manager.execute(request.line))


@app.post("/api/reset")
def reset_session():
    """Starts a fresh game from the world setup."""
    manager.reset()
    return JSONResponse({"success": True, "message": "Game reset successfully"})


# --- Server Entry Point ---

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
