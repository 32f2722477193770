"""Location routes."""

from fastapi import APIRouter, HTTPException, Response, status

from stellar.core.rbac import CRUD_ROLES, gate
from stellar.db.session import DbSession
from stellar.models.empire import Empire
from stellar.models.location import Location
from stellar.schemas.location import LocationCreate, LocationResponse, LocationUpdate
from stellar.services.table import RecordNotFoundError, ResourceTable

router = APIRouter()


def _locations(db) -> ResourceTable[Location]:
    return ResourceTable(db, Location)


@router.post(
    "",
    response_model=LocationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[gate(CRUD_ROLES.create)],
)
def create_location(location_data: LocationCreate, db: DbSession):
    """Create a new location."""
    return _locations(db).create(location_data.model_dump())


@router.get("", response_model=list[LocationResponse], dependencies=[gate(CRUD_ROLES.read)])
def list_locations(db: DbSession):
    """List all locations."""
    return _locations(db).get_all()


@router.get("/{location_id}", response_model=LocationResponse, dependencies=[gate(CRUD_ROLES.read)])
def get_location(location_id: int, db: DbSession):
    """Get a specific location."""
    location = _locations(db).get(location_id)
    if not location:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return location


@router.put("/{location_id}", response_model=LocationResponse, dependencies=[gate(CRUD_ROLES.update)])
def update_location(location_id: int, location_data: LocationUpdate, db: DbSession):
    """Update a location."""
    update_data = location_data.model_dump(exclude_unset=True, exclude_none=True)
    try:
        return _locations(db).update(location_id, update_data)
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")


@router.delete(
    "/{location_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[gate(CRUD_ROLES.delete)],
)
def delete_location(location_id: int, db: DbSession):
    """Delete a location that no empire is seated at."""
    in_use = db.query(Empire.id).filter(Empire.location_id == location_id).first()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Location is referenced by existing empires",
        )
    try:
        _locations(db).delete(location_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
