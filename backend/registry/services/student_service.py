"""
Service métier pour les élèves : les cinq opérations du registre.

Chaque opération reçoit l'identifiant de l'utilisateur connecté et filtre
explicitement sur `owner_id` : un élève d'un autre utilisateur est traité
comme inexistant (NotFound). La matrícula reste unique sur toute la table.
"""

import uuid
import logging
from datetime import date
from typing import Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from registry.errors import DuplicateKey, InvalidRecord, NotFound, StoreError
from registry.models.student import Student
from registry.schemas.student import StudentRecord
from registry.services.validator import validate

logger = logging.getLogger(__name__)


def _check(raw: Mapping) -> StudentRecord:
    """Revalide la saisie côté serveur ; lève InvalidRecord avec tous les messages."""
    result = validate(raw)
    if not result.ok:
        raise InvalidRecord(result.errors)
    return result.record


def _parse_birth_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidRecord({"birth_date": "Data de nascimento inválida"})


def _get_owned(db: Session, owner_id: uuid.UUID, student_id: uuid.UUID) -> Student:
    student = db.execute(
        select(Student).where(Student.id == student_id, Student.owner_id == owner_id)
    ).scalar_one_or_none()
    if student is None:
        raise NotFound()
    return student


def _store_failure(db: Session, action: str, exc: SQLAlchemyError) -> StoreError:
    db.rollback()
    logger.error("Échec BDD (%s) : %s", action, exc)
    return StoreError()


def list_students(db: Session, owner_id: uuid.UUID) -> list[Student]:
    """Retourne les élèves de l'utilisateur, du plus récent au plus ancien."""
    try:
        return list(db.execute(
            select(Student)
            .where(Student.owner_id == owner_id)
            .order_by(Student.created_at.desc())
        ).scalars().all())
    except SQLAlchemyError as exc:
        raise _store_failure(db, "list", exc)


def get_student(db: Session, owner_id: uuid.UUID, student_id: uuid.UUID) -> Student:
    """Retourne un élève visible par l'utilisateur, sinon NotFound."""
    try:
        return _get_owned(db, owner_id, student_id)
    except SQLAlchemyError as exc:
        raise _store_failure(db, "get", exc)


def create_student(db: Session, owner_id: uuid.UUID, raw: Mapping) -> Student:
    """
    Crée un élève pour l'utilisateur connecté.
    Lève DuplicateKey si la matrícula existe déjà (quel que soit le propriétaire).
    """
    record = _check(raw)
    birth_date = _parse_birth_date(record.birth_date)

    try:
        existing = db.execute(
            select(Student.id).where(Student.matricula == record.matricula)
        ).scalar_one_or_none()
        if existing is not None:
            raise DuplicateKey()

        student = Student(
            owner_id=owner_id,
            name=record.name,
            matricula=record.matricula,
            course=record.course,
            age=record.age,
            birth_date=birth_date,
        )
        db.add(student)
        try:
            db.commit()
        except IntegrityError:
            # Insertion concurrente de la même matrícula entre le SELECT et le COMMIT
            db.rollback()
            raise DuplicateKey()
        db.refresh(student)
    except SQLAlchemyError as exc:
        raise _store_failure(db, "insert", exc)

    logger.info("Aluno criado : %s (%s) par %s", student.matricula, student.id, owner_id)
    return student


def update_student(db: Session, owner_id: uuid.UUID, student_id: uuid.UUID, raw: Mapping) -> Student:
    """
    Remplace tous les champs modifiables d'un élève (pas de mise à jour partielle).
    La matrícula est immuable : une valeur différente est rejetée.
    """
    record = _check(raw)
    birth_date = _parse_birth_date(record.birth_date)

    try:
        student = _get_owned(db, owner_id, student_id)
        if record.matricula != student.matricula:
            raise InvalidRecord({"matricula": "A matrícula não pode ser alterada"})

        student.name = record.name
        student.course = record.course
        student.age = record.age
        student.birth_date = birth_date

        db.commit()
        db.refresh(student)
    except SQLAlchemyError as exc:
        raise _store_failure(db, "update", exc)

    logger.info("Aluno atualizado : %s (%s)", student.matricula, student.id)
    return student


def delete_student(db: Session, owner_id: uuid.UUID, student_id: uuid.UUID) -> None:
    """Supprime définitivement un élève. Une seconde suppression lève NotFound."""
    try:
        student = _get_owned(db, owner_id, student_id)
        db.delete(student)
        db.commit()
    except SQLAlchemyError as exc:
        raise _store_failure(db, "delete", exc)

    logger.info("Aluno excluído : %s", student_id)
