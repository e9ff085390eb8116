"""Shared FastAPI dependencies."""
from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from runcoach.database import get_db
from runcoach.models.database_models import Athlete


def get_today() -> date:
    """Current date handed to every planning call; overridden in tests."""
    return date.today()


def get_athlete(athlete_id: int, db: Annotated[Session, Depends(get_db)]) -> Athlete:
    """Resolve the path athlete or fail with 404."""
    athlete = db.get(Athlete, athlete_id)
    if athlete is None:
        raise HTTPException(status_code=404, detail=f"Athlete {athlete_id} not found")
    return athlete


DbSession = Annotated[Session, Depends(get_db)]
Today = Annotated[date, Depends(get_today)]
CurrentAthlete = Annotated[Athlete, Depends(get_athlete)]
