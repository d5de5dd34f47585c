"""Crisis log endpoints: list, create, edit, delete, quick rest entry."""

from fastapi import APIRouter, Depends, HTTPException, status

from factory import ServiceFactory
from adapters.rest.dependencies import get_factory
from adapters.rest.schemas import CrisisBody, CrisisPatchBody, RestBody

router = APIRouter(prefix="/crises", tags=["crises"])


@router.get("")
def list_crises(
    limit: int | None = None,
    factory: ServiceFactory = Depends(get_factory),
):
    """All crises, most recent first (optionally only the latest *limit*)."""
    crises = factory.crisis_repository.get_all()
    if limit is not None:
        crises = crises[:limit]
    return [c.to_dict() for c in crises]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_crisis(
    body: CrisisBody,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_crisis_log_service()
    try:
        created = service.log(body.to_draft())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return created.to_dict()


@router.post("/rest", status_code=status.HTTP_201_CREATED)
def create_rest_entry(
    body: RestBody,
    factory: ServiceFactory = Depends(get_factory),
):
    """One-tap rest entry for the given day (today by default)."""
    service = factory.create_crisis_log_service()
    try:
        created = service.log_rest(body.date)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return created.to_dict()


@router.get("/{crisis_id}")
def get_crisis(
    crisis_id: str,
    factory: ServiceFactory = Depends(get_factory),
):
    crisis = factory.crisis_repository.get_by_id(crisis_id)
    if crisis is None:
        raise HTTPException(status_code=404, detail="Crisis not found")
    return crisis.to_dict()


@router.patch("/{crisis_id}")
def update_crisis(
    crisis_id: str,
    body: CrisisPatchBody,
    factory: ServiceFactory = Depends(get_factory),
):
    """Merge the sent fields into the crisis."""
    try:
        updated = factory.crisis_repository.update(crisis_id, body.to_changes())
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Crisis not found")
    return updated.to_dict()


@router.delete("/{crisis_id}")
def delete_crisis(
    crisis_id: str,
    factory: ServiceFactory = Depends(get_factory),
):
    """Delete is idempotent: an unknown id still returns ok."""
    deleted = factory.crisis_repository.delete(crisis_id)
    return {"ok": True, "deleted": deleted}
