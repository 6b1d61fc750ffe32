"""Pydantic schemas for user accounts."""
from __future__ import annotations

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)


__all__ = ["UserCreate"]
