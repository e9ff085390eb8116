"""API endpoints for athlete records."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import select

from runcoach.models.database_models import Athlete
from runcoach.models.schemas import AthleteCreate, AthleteResponse
from runcoach.routers.dependencies import CurrentAthlete, DbSession


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/athletes", tags=["athletes"])


@router.post("", response_model=AthleteResponse, status_code=201)
async def create_athlete(payload: AthleteCreate, db: DbSession):
    """Register an athlete so goals and logs can reference it."""
    try:
        if db.scalar(select(Athlete.id).where(Athlete.email == payload.email)) is not None:
            raise HTTPException(status_code=400, detail="Email already registered")

        athlete = Athlete(name=payload.name, email=payload.email)
        db.add(athlete)
        db.commit()
        db.refresh(athlete)

        logger.info("Created athlete: id=%s", athlete.id)
        return athlete

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to create athlete")
        raise HTTPException(status_code=500, detail=f"Failed to create athlete: {str(e)}")


@router.get("/{athlete_id}", response_model=AthleteResponse)
async def get_athlete_by_id(athlete: CurrentAthlete):
    return athlete
