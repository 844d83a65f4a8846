from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pathlib import Path
import json
import os

# Support both local development and Docker
DATA_DIR = Path("/greencard_stub") if os.path.exists("/greencard_stub") else Path(__file__).resolve().parent / "greencard_stub"

security = HTTPBasic(auto_error=False)


def load_accounts() -> dict:
    return json.loads((DATA_DIR / "accounts.json").read_text())


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "data": None, "errors": [{"message": message}]})


def create_mock_app() -> FastAPI:
    # Trailing slashes are not redirected: the real API answers them with 405
    app = FastAPI(title="Mock Greencard Server", version="1.0.0", redirect_slashes=False)
    app.state.accounts = load_accounts()

    def authorize(request: Request, credentials: HTTPBasicCredentials | None = Depends(security)):
        if credentials is None:
            return None
        record = request.app.state.accounts.get(credentials.username)
        if record is None or record["password"] != credentials.password:
            return None
        return record

    @app.get("/health")
    def health(): return {"status": "ok"}

    @app.get("/api/v1/ping")
    def ping(): return {"success": True, "data": None}

    @app.post("/api/v1/auth")
    def auth(record=Depends(authorize)):
        if record is None:
            return failure(401, "Invalid card number or password")
        return {"success": True, "data": None}

    @app.get("/api/v1/account")
    def get_account(record=Depends(authorize)):
        if record is None:
            return failure(401, "Invalid card number or password")
        return {"success": True, "data": {"account": record["account"], "card": record["card"]}}

    @app.put("/api/v1/account")
    async def put_account(request: Request, record=Depends(authorize)):
        if record is None:
            return failure(401, "Invalid card number or password")
        body = await request.json()
        update = body.get("account")
        if not isinstance(update, dict):
            return failure(400, "account is required")
        record["account"].update({key: value for key, value in update.items() if key != "username"})
        return {"success": True, "data": {"account": record["account"], "card": record["card"]}}

    @app.get("/api/v1/history")
    def get_history(record=Depends(authorize)):
        if record is None:
            return failure(401, "Invalid card number or password")
        return {"success": True, "data": record["history"]}

    return app


app = create_mock_app()
