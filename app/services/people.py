"""
People the user works with: stakeholders of goals, assigners and assignees
of checklist items.

Stakeholder and assignee fields store Person ids as given; deleting a
Person leaves those references in place.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidArgumentError, NotFoundError
from app.models.person import Person

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {
    "name", "work_function", "characteristics", "biases",
    "communication_style", "relationship_type", "profile_picture",
}


@dataclass
class NewPerson:
    name: str
    work_function: Optional[str] = None
    characteristics: Optional[str] = None
    biases: Optional[str] = None
    communication_style: Optional[str] = None
    relationship_type: Optional[str] = None
    profile_picture: Optional[str] = None


def _check_name(value: str) -> str:
    name = value.strip() if isinstance(value, str) else ""
    if not name:
        raise InvalidArgumentError("name", "name is required", value)
    return name


def list_people(db: Session, user_id: str) -> list[Person]:
    return db.query(Person).filter(Person.user_id == user_id).order_by(Person.name.asc()).all()


def get_person(db: Session, user_id: str, person_id: str) -> Person:
    person = db.query(Person).filter(Person.id == person_id, Person.user_id == user_id).first()
    if person is None:
        raise NotFoundError("Person", person_id)
    return person


def create_person(db: Session, user_id: str, new: NewPerson) -> Person:
    values = asdict(new)
    values["name"] = _check_name(new.name)
    person = Person(user_id=user_id, **values)
    db.add(person)
    db.commit()
    db.refresh(person)
    logger.info("Person %s added for user %s", person.id, user_id)
    return person


def update_person(db: Session, user_id: str, person_id: str, changes: dict[str, Any]) -> Person:
    """Partial update; None values and unknown keys are ignored."""
    person = get_person(db, user_id, person_id)
    for field, value in changes.items():
        if field not in _EDITABLE_FIELDS or value is None:
            continue
        if field == "name":
            value = _check_name(value)
        setattr(person, field, value)
    db.commit()
    db.refresh(person)
    return person


def delete_person(db: Session, user_id: str, person_id: str) -> None:
    person = get_person(db, user_id, person_id)
    db.delete(person)
    db.commit()
    logger.info("Person %s deleted", person_id)
