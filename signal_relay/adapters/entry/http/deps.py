from fastapi import Request

from ....core.repositories.simulation_repository import SimulationRepository
from ....core.usecases.dispatch_signal_use_case import DispatchSignalUseCase


def get_dispatcher(request: Request) -> DispatchSignalUseCase:
    """
    Resolve the dispatcher wired by the supervisor from FastAPI app state.
    """
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("Dispatcher is not initialized in app.state.dispatcher")
    return dispatcher


def get_simulation_repo(request: Request) -> SimulationRepository:
    repo = getattr(request.app.state, "simulation_repo", None)
    if repo is None:
        raise RuntimeError("Simulation repository is not initialized in app.state.simulation_repo")
    return repo
