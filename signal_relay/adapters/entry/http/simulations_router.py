from typing import Any, Dict, List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from .deps import get_simulation_repo
from ....core.repositories.simulation_repository import SimulationRepository
from ....core.services.correlation_token import normalize_username

router = APIRouter(prefix="/simulations", tags=["simulations"])


class SimulationListOutDTO(BaseModel):
    success: bool = True
    count: int
    simulations: List[Dict[str, Any]]


class SimulationOutDTO(BaseModel):
    success: bool = True
    simulation: Dict[str, Any]


@router.get("", response_model=SimulationListOutDTO)
async def list_simulations(
    username: Optional[str] = Query(None),
    status: Optional[Literal["initiated", "success", "failed"]] = Query(None),
    limit: int = Query(10, ge=1, le=100),
    repo: SimulationRepository = Depends(get_simulation_repo),
):
    """
    Recent simulations, newest first (optionally filtered by Telegram username / status).
    """
    docs = await repo.list_recent(
        username=normalize_username(username) if username else None,
        status=status,
        limit=limit,
    )
    return {"success": True, "count": len(docs), "simulations": docs}


@router.get("/{simulation_id}", response_model=SimulationOutDTO)
async def get_simulation(simulation_id: str, repo: SimulationRepository = Depends(get_simulation_repo)):
    doc = await repo.get_by_id(simulation_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Simulation not found")
    return {"success": True, "simulation": doc}
