"""
Seat diagram endpoints.

Besides the standard routes, a diagram's grid can be read, replaced as a
whole, or edited one column or row at a time. Every response that returns
spaces returns the full, updated grid of the diagram.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory_core.models import User
from inventory_core.repositories import SeatDiagramRepository

from ..auth.permissions import require_permission
from ..database import get_db
from ..schemas import (
    ColumnAddRequest,
    ListResponse,
    SeatDiagramCreate,
    SeatDiagramResponse,
    SeatDiagramUpdate,
    SpaceResponse,
    SpacesUpdateRequest,
)
from ..services import seat_diagram_service
from .crud import CrudResource, add_crud_routes

router = APIRouter(prefix="/seat-diagrams", tags=["seat-diagrams"])

EDIT_GRID = "inventory:editSeatDiagramGrid"


# =============================================================================
# Spaces
# =============================================================================


@router.get("/{diagram_id}/spaces", response_model=ListResponse[SpaceResponse])
def list_seat_diagram_spaces(
    diagram_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:listSeatDiagramSpaces")),
):
    return {"data": seat_diagram_service.list_spaces(db, diagram_id)}


@router.put("/{diagram_id}/spaces", response_model=ListResponse[SpaceResponse])
def update_seat_diagram_spaces(
    diagram_id: int,
    payload: SpacesUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("inventory:updateSeatDiagramSpaces")),
):
    """Replace every space of the diagram after validating the new grid."""
    spaces = [space.model_dump() for space in payload.spaces]
    return {"data": seat_diagram_service.replace_spaces(db, diagram_id, spaces)}


# =============================================================================
# Grid editing
# =============================================================================


@router.post("/{diagram_id}/floors/{floor_number}/columns", response_model=ListResponse[SpaceResponse])
def add_seat_column(
    diagram_id: int,
    floor_number: int,
    payload: ColumnAddRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(EDIT_GRID)),
):
    spaces = seat_diagram_service.add_column(db, diagram_id, floor_number, payload.after_x)
    return {"data": spaces}


@router.delete(
    "/{diagram_id}/floors/{floor_number}/columns/{position_x}",
    response_model=ListResponse[SpaceResponse],
)
def remove_seat_column(
    diagram_id: int,
    floor_number: int,
    position_x: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(EDIT_GRID)),
):
    spaces = seat_diagram_service.remove_column(db, diagram_id, floor_number, position_x)
    return {"data": spaces}


@router.post("/{diagram_id}/floors/{floor_number}/rows", response_model=ListResponse[SpaceResponse])
def add_seat_row(
    diagram_id: int,
    floor_number: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(EDIT_GRID)),
):
    return {"data": seat_diagram_service.add_row(db, diagram_id, floor_number)}


@router.delete("/{diagram_id}/floors/{floor_number}/rows", response_model=ListResponse[SpaceResponse])
def remove_seat_row(
    diagram_id: int,
    floor_number: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(EDIT_GRID)),
):
    """Remove the last row of the floor."""
    return {"data": seat_diagram_service.remove_row(db, diagram_id, floor_number)}


add_crud_routes(
    router,
    CrudResource(
        singular="SeatDiagram",
        plural="SeatDiagrams",
        repository=SeatDiagramRepository,
        create_schema=SeatDiagramCreate,
        update_schema=SeatDiagramUpdate,
        response_schema=SeatDiagramResponse,
        create=seat_diagram_service.create_seat_diagram,
        update=seat_diagram_service.update_seat_diagram,
    ),
)

routers = [router]
