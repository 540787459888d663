"""
Validation des données d'un élève saisies dans le formulaire.

Fonction pure, partagée par l'API (avant chaque écriture) et par le formulaire
client (avant tout appel réseau). Ne lève jamais d'exception : toutes les règles
sont évaluées et le résultat contient au plus un message par champ.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from registry.schemas.student import StudentRecord

NAME_MIN, NAME_MAX = 2, 100
MATRICULA_MIN, MATRICULA_MAX = 3, 50
COURSE_MIN, COURSE_MAX = 2, 100
AGE_MIN, AGE_MAX = 1, 150

FIELDS = ("name", "matricula", "course", "age", "birth_date")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class ValidationResult:
    record: Optional[StudentRecord] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _parse_age(value: Any) -> Optional[int]:
    """
    Lit l'entier en tête de la saisie, comme `parseInt` côté navigateur :
    "20.5" et "20abc" donnent 20. None si aucun chiffre en tête.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def _check_length(value: Any, low: int, high: int, too_short: str, too_long: str) -> Optional[str]:
    if not isinstance(value, str) or len(value) < low:
        return too_short
    if len(value) > high:
        return too_long
    return None


def validate(raw: Mapping[str, Any]) -> ValidationResult:
    """
    Valide une saisie brute {name, matricula, course, age, birth_date}.

    Les chaînes sont conservées telles quelles ; seul `age` est converti en entier.
    Un âge non numérique est traité comme hors plage (même message que le minimum).
    """
    errors: Dict[str, str] = {}

    name = raw.get("name", "")
    matricula = raw.get("matricula", "")
    course = raw.get("course", "")
    birth_date = raw.get("birth_date", "")

    message = _check_length(
        name, NAME_MIN, NAME_MAX,
        "O nome deve ter no mínimo 2 caracteres",
        "O nome deve ter no máximo 100 caracteres",
    )
    if message:
        errors["name"] = message

    message = _check_length(
        matricula, MATRICULA_MIN, MATRICULA_MAX,
        "A matrícula deve ter no mínimo 3 caracteres",
        "A matrícula deve ter no máximo 50 caracteres",
    )
    if message:
        errors["matricula"] = message

    message = _check_length(
        course, COURSE_MIN, COURSE_MAX,
        "O curso deve ter no mínimo 2 caracteres",
        "O curso deve ter no máximo 100 caracteres",
    )
    if message:
        errors["course"] = message

    age = _parse_age(raw.get("age"))
    if age is None or age < AGE_MIN:
        errors["age"] = "A idade deve ser maior que 0"
    elif age > AGE_MAX:
        errors["age"] = "A idade deve ser no máximo 150"

    if not isinstance(birth_date, str) or not birth_date:
        errors["birth_date"] = "A data de nascimento é obrigatória"

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(record=StudentRecord(
        name=name,
        matricula=matricula,
        course=course,
        age=age,
        birth_date=birth_date,
    ))
