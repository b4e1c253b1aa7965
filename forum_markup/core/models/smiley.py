"""Smiley model."""

from __future__ import annotations

from pydantic import BaseModel


class Smiley(BaseModel):
    model_config = {"frozen": True}

    code: str
    path: str
