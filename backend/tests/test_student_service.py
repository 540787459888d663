"""
Tests du service élèves sur une vraie BDD SQLite en mémoire.
Couvrent l'unicité de la matrícula, le filtrage par propriétaire et le cycle de vie.
"""

import uuid
from datetime import date, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from registry.errors import DuplicateKey, InvalidRecord, NotFound, StoreError
from registry.models.student import Student
from registry.services.student_service import (
    create_student,
    delete_student,
    get_student,
    list_students,
    update_student,
)

ANA = {
    "name": "Ana Silva",
    "matricula": "2024001",
    "course": "Engenharia",
    "age": 20,
    "birth_date": "2004-05-01",
}


def count_students(db) -> int:
    return db.execute(select(func.count()).select_from(Student)).scalar()


# --- list_students ---

def test_liste_vide(db, owner):
    """Aucun élève → liste vide, pas d'erreur."""
    assert list_students(db, owner.id) == []


def test_scenario_insertion_puis_liste(db, owner):
    """Insertion d'Ana par U → la liste de U contient exactement cette ligne."""
    created = create_student(db, owner.id, ANA)

    students = list_students(db, owner.id)

    assert len(students) == 1
    s = students[0]
    assert s.id == created.id
    assert s.owner_id == owner.id
    assert s.created_at is not None
    assert (s.name, s.matricula, s.course, s.age) == ("Ana Silva", "2024001", "Engenharia", 20)
    assert s.birth_date == date(2004, 5, 1)


def test_liste_triee_plus_recent_en_premier(db, owner):
    first = create_student(db, owner.id, ANA)
    second = create_student(db, owner.id, {**ANA, "matricula": "2024002", "name": "Bia Costa"})
    first.created_at = datetime(2024, 1, 1)
    second.created_at = datetime(2024, 1, 1) + timedelta(hours=1)
    db.commit()

    students = list_students(db, owner.id)

    assert [s.matricula for s in students] == ["2024002", "2024001"]


def test_liste_filtree_par_proprietaire(db, owner, other_owner):
    create_student(db, owner.id, ANA)
    create_student(db, other_owner.id, {**ANA, "matricula": "2024999"})

    assert [s.matricula for s in list_students(db, owner.id)] == ["2024001"]
    assert [s.matricula for s in list_students(db, other_owner.id)] == ["2024999"]


# --- create_student ---

def test_matricula_dupliquee(db, owner):
    """Deuxième insertion avec la même matrícula → DuplicateKey, aucune ligne créée."""
    create_student(db, owner.id, ANA)

    with pytest.raises(DuplicateKey) as exc:
        create_student(db, owner.id, {**ANA, "name": "Outra Pessoa"})

    assert exc.value.message == "Esta matrícula já está cadastrada"
    assert len(list_students(db, owner.id)) == 1


def test_matricula_unique_entre_proprietaires(db, owner, other_owner):
    """L'unicité porte sur toute la table, pas seulement sur le propriétaire."""
    create_student(db, owner.id, ANA)

    with pytest.raises(DuplicateKey):
        create_student(db, other_owner.id, ANA)
    assert count_students(db) == 1


def test_creation_saisie_invalide(db, owner):
    with pytest.raises(InvalidRecord) as exc:
        create_student(db, owner.id, {**ANA, "name": "A", "age": "0"})

    assert set(exc.value.errors) == {"name", "age"}
    assert count_students(db) == 0


def test_creation_date_illisible(db, owner):
    with pytest.raises(InvalidRecord) as exc:
        create_student(db, owner.id, {**ANA, "birth_date": "01/05/2004"})
    assert set(exc.value.errors) == {"birth_date"}


def test_creation_course_concurrente():
    """IntegrityError au commit (insertion concurrente) → DuplicateKey après rollback."""
    db = MagicMock()
    db.execute.return_value.scalar_one_or_none.return_value = None
    db.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(DuplicateKey):
        create_student(db, uuid.uuid4(), ANA)
    db.rollback.assert_called_once()


def test_creation_panne_bdd():
    db = MagicMock()
    db.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

    with pytest.raises(StoreError):
        create_student(db, uuid.uuid4(), ANA)
    db.rollback.assert_called_once()


# --- get_student / update_student ---

def test_scenario_mise_a_jour_cours(db, owner):
    """Cours modifié en « Medicina » → relu tel quel, matrícula inchangée."""
    created = create_student(db, owner.id, ANA)

    update_student(db, owner.id, created.id, {**ANA, "course": "Medicina"})
    reloaded = get_student(db, owner.id, created.id)

    assert reloaded.course == "Medicina"
    assert reloaded.matricula == "2024001"


def test_mise_a_jour_matricula_refusee(db, owner):
    created = create_student(db, owner.id, ANA)

    with pytest.raises(InvalidRecord) as exc:
        update_student(db, owner.id, created.id, {**ANA, "matricula": "9999999"})

    assert "matricula" in exc.value.errors
    assert get_student(db, owner.id, created.id).matricula == "2024001"


def test_get_introuvable(db, owner):
    with pytest.raises(NotFound):
        get_student(db, owner.id, uuid.uuid4())


def test_autre_proprietaire_ne_voit_pas(db, owner, other_owner):
    """Un élève d'un autre utilisateur est traité comme inexistant."""
    created = create_student(db, owner.id, ANA)

    with pytest.raises(NotFound):
        get_student(db, other_owner.id, created.id)
    with pytest.raises(NotFound):
        update_student(db, other_owner.id, created.id, {**ANA, "course": "Direito"})
    with pytest.raises(NotFound):
        delete_student(db, other_owner.id, created.id)

    assert get_student(db, owner.id, created.id).course == "Engenharia"


def test_mise_a_jour_introuvable(db, owner):
    with pytest.raises(NotFound):
        update_student(db, owner.id, uuid.uuid4(), ANA)


# --- delete_student ---

def test_double_suppression(db, owner):
    """Supprimer deux fois le même élève → NotFound au second appel."""
    created = create_student(db, owner.id, ANA)

    delete_student(db, owner.id, created.id)
    with pytest.raises(NotFound):
        delete_student(db, owner.id, created.id)

    assert list_students(db, owner.id) == []


def test_matricula_reutilisable_apres_suppression(db, owner):
    created = create_student(db, owner.id, ANA)
    delete_student(db, owner.id, created.id)

    again = create_student(db, owner.id, ANA)
    assert again.id != created.id
