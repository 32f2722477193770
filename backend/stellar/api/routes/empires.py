"""Empire routes."""

from fastapi import APIRouter, HTTPException, Response, status

from stellar.core.rbac import CRUD_ROLES, gate
from stellar.db.session import DbSession
from stellar.models.empire import Empire
from stellar.models.location import Location
from stellar.schemas.empire import EmpireCreate, EmpireResponse, EmpireUpdate
from stellar.services.table import RecordNotFoundError, ResourceTable

router = APIRouter()


def _empires(db) -> ResourceTable[Empire]:
    return ResourceTable(db, Empire)


def _ensure_location_exists(db, location_id: int) -> None:
    if db.get(Location, location_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Location {location_id} does not exist",
        )


@router.post(
    "",
    response_model=EmpireResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[gate(CRUD_ROLES.create)],
)
def create_empire(empire_data: EmpireCreate, db: DbSession):
    """Create a new empire seated at an existing location."""
    _ensure_location_exists(db, empire_data.location_id)
    return _empires(db).create(empire_data.model_dump())


@router.get("", response_model=list[EmpireResponse], dependencies=[gate(CRUD_ROLES.read)])
def list_empires(db: DbSession):
    """List all empires."""
    return _empires(db).get_all()


@router.get("/{empire_id}", response_model=EmpireResponse, dependencies=[gate(CRUD_ROLES.read)])
def get_empire(empire_id: int, db: DbSession):
    """Get a specific empire."""
    empire = _empires(db).get(empire_id)
    if not empire:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empire not found")
    return empire


@router.put("/{empire_id}", response_model=EmpireResponse, dependencies=[gate(CRUD_ROLES.update)])
def update_empire(empire_id: int, empire_data: EmpireUpdate, db: DbSession):
    """Update an empire."""
    update_data = empire_data.model_dump(exclude_unset=True, exclude_none=True)
    if update_data.get("location_id") is not None:
        _ensure_location_exists(db, update_data["location_id"])
    try:
        return _empires(db).update(empire_id, update_data)
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empire not found")


@router.delete(
    "/{empire_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[gate(CRUD_ROLES.delete)],
)
def delete_empire(empire_id: int, db: DbSession):
    """Delete an empire."""
    try:
        _empires(db).delete(empire_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empire not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
