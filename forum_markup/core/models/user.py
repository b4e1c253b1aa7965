"""User model."""

from __future__ import annotations

from pydantic import BaseModel


class User(BaseModel):
    model_config = {"frozen": True}

    id: str
    # Login name
    user_name: str
    display_name: str
