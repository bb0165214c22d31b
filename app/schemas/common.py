from pydantic import BaseModel
from typing import Optional


# ─── Error Body returned by the remote API ────────────────────────────────────
class ApiErrorBody(BaseModel):
    message: Optional[str] = None

    model_config = {"extra": "ignore"}


# ─── Error Detail (per field) ──────────────────────────────────────────────────
class ErrorDetail(BaseModel):
    field: str
    message: str


# ─── Health Response ──────────────────────────────────────────────────────────
class HealthResponse(BaseModel):
    status: str = "ok"
    app: str
    version: str


# ─── Helper Functions ─────────────────────────────────────────────────────────
def error_details(errors: dict[str, str]) -> list[ErrorDetail]:
    """Flatten a field -> message map into a list, keeping field order."""
    return [ErrorDetail(field=f, message=m) for f, m in errors.items()]
