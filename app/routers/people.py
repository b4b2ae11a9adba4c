"""
People router.

GET    /people - the caller's people, by name
POST   /people
GET    /people/{person_id}
PATCH  /people/{person_id} - partial update
DELETE /people/{person_id}
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.identity import get_current_user_id
from app.db.base import get_db
from app.models.person import Person
from app.schemas.common import ERROR_RESPONSES
from app.schemas.person import PersonCreate, PersonListResponse, PersonResponse, PersonUpdate
from app.services.people import (
    NewPerson,
    create_person,
    delete_person,
    get_person,
    list_people,
    update_person,
)

router = APIRouter(prefix="/people", tags=["people"], responses=ERROR_RESPONSES)


def _person_to_response(p: Person) -> PersonResponse:
    return PersonResponse(
        id=p.id,
        name=p.name,
        work_function=p.work_function,
        characteristics=p.characteristics,
        biases=p.biases,
        communication_style=p.communication_style,
        relationship_type=p.relationship_type,
        profile_picture=p.profile_picture,
        created_at=p.created_at.isoformat(),
        updated_at=p.updated_at.isoformat(),
    )


@router.get("", response_model=PersonListResponse, summary="List people")
def get_people(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    rows = list_people(db, user_id)
    return PersonListResponse(total=len(rows), items=[_person_to_response(p) for p in rows])


@router.post(
    "",
    response_model=PersonResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a person",
)
def post_person(
    payload: PersonCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """The returned id is what goal stakeholders and item assignees refer to."""
    person = create_person(db, user_id, NewPerson(**payload.model_dump()))
    return _person_to_response(person)


@router.get("/{person_id}", response_model=PersonResponse, summary="Get a person")
def get_one(
    person_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return _person_to_response(get_person(db, user_id, person_id))


@router.patch("/{person_id}", response_model=PersonResponse, summary="Update a person")
def patch_person(
    person_id: str,
    payload: PersonUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    person = update_person(db, user_id, person_id, payload.model_dump(exclude_unset=True))
    return _person_to_response(person)


@router.delete(
    "/{person_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a person",
)
def remove_person(
    person_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    delete_person(db, user_id, person_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
