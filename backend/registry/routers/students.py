"""
Router pour les élèves de l'utilisateur connecté.
GET    /api/v1/students       — liste, plus récents d'abord
GET    /api/v1/students/{id}  — détail
POST   /api/v1/students       — création
PUT    /api/v1/students/{id}  — mise à jour complète (matrícula immuable)
DELETE /api/v1/students/{id}  — suppression

Les erreurs métier (registry.errors) sont converties en réponses JSON par
le handler déclaré dans registry.main.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from registry.database import get_db
from registry.dependencies import get_current_user
from registry.models.user import User
from registry.schemas.error import ErrorResponse
from registry.schemas.student import StudentInput, StudentResponse
from registry.services import student_service

router = APIRouter(
    prefix="/api/v1/students",
    tags=["Alunos"],
    responses={401: {"model": ErrorResponse}},
)


@router.get("", response_model=List[StudentResponse], summary="Listar os alunos")
def list_students(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Retourne les élèves de l'utilisateur, triés par date de création décroissante."""
    return student_service.list_students(db, current_user.id)


@router.get("/{student_id}", response_model=StudentResponse, summary="Detalhe de um aluno",
            responses={404: {"model": ErrorResponse}})
def get_student(
    student_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return student_service.get_student(db, current_user.id, student_id)


@router.post("", response_model=StudentResponse, status_code=201, summary="Cadastrar um aluno",
             responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})
def create_student(
    data: StudentInput,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Crée un élève ; l'identifiant, le propriétaire et la date de création sont attribués ici."""
    return student_service.create_student(db, current_user.id, data.model_dump())


@router.put("/{student_id}", response_model=StudentResponse, summary="Atualizar um aluno",
            responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})
def update_student(
    student_id: uuid.UUID,
    data: StudentInput,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remplace tous les champs de l'élève. Une matrícula différente est rejetée (422)."""
    return student_service.update_student(db, current_user.id, student_id, data.model_dump())


@router.delete("/{student_id}", status_code=204, summary="Excluir um aluno",
               responses={404: {"model": ErrorResponse}})
def delete_student(
    student_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Supprime définitivement un élève."""
    student_service.delete_student(db, current_user.id, student_id)
