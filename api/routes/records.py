# api/routes/records.py

from typing import List, Optional, Sequence, Type
from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from shelf.sa.database import get_db
from shelf.sa.repositories import OwnedRepository


def get_owner(x_owner_id: Optional[str] = Header(None)) -> str:
    """Identity of the caller, taken from the X-Owner-Id header"""
    if not x_owner_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-Owner-Id header")
    return x_owner_id


def crud_router(prefix: str, repository: Type[OwnedRepository], schema: Type[BaseModel],
                create_schema: Type[BaseModel], update_schema: Type[BaseModel],
                filters: Sequence[str] = ()) -> APIRouter:
    """Build list/get/create/update/delete endpoints for one owner-scoped entity.

    Args:
        prefix: URL prefix, e.g. "/books"
        repository: Repository class for the entity
        schema: Response schema
        create_schema: Request body for POST
        update_schema: Request body for PATCH; only fields sent are applied
        filters: Query parameters accepted as equality filters on GET
    """
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])
    name = schema.__name__

    @router.get("", response_model=List[schema])
    def list_records(request: Request, owner: str = Depends(get_owner), db: Session = Depends(get_db)):
        equals = {k: v for k, v in request.query_params.items() if k in filters}
        return repository(db, owner).list(**equals)

    @router.get("/{record_id}", response_model=schema)
    def get_record(record_id: str, owner: str = Depends(get_owner), db: Session = Depends(get_db)):
        record = repository(db, owner).get_by_id(record_id)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found")
        return record

    @router.post("", response_model=schema, status_code=status.HTTP_201_CREATED)
    def create_record(body: create_schema, owner: str = Depends(get_owner), db: Session = Depends(get_db)):
        try:
            return repository(db, owner).create(**body.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    @router.patch("/{record_id}", response_model=schema)
    def update_record(record_id: str, body: update_schema, owner: str = Depends(get_owner),
                      db: Session = Depends(get_db)):
        try:
            record = repository(db, owner).update(record_id, **body.model_dump(exclude_unset=True))
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found")
        return record

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_record(record_id: str, owner: str = Depends(get_owner), db: Session = Depends(get_db)):
        try:
            deleted = repository(db, owner).delete(record_id)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
