"""
Gestion des collections ordonnées (blocks d'une page, pages d'un user).

Invariant: pour un parent donné, les positions des items actifs
(is_deleted == False) forment exactement 0..n-1, sans trou ni doublon.
Un item dans la corbeille garde sa dernière position, hors invariant.

Les écritures de position passent toutes par `serialized()`, qui tient le
verrou du parent jusqu'au commit.
"""

import logging
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notely.core.locks import parent_locks
from notely.models.block import Block
from notely.models.page import Page
from notely.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scope:
    """Un parent et la collection qu'il ordonne"""
    model: type
    parent_model: type
    parent_column: str
    parent_id: int

    @property
    def key(self) -> Tuple[str, int]:
        return (self.model.__tablename__, self.parent_id)

    def query(self, db: Session):
        return db.query(self.model).filter(getattr(self.model, self.parent_column) == self.parent_id)

    def active(self, db: Session):
        return self.query(db).filter(self.model.is_deleted == False)


def block_scope(page_id: int) -> Scope:
    return Scope(Block, Page, "page_id", page_id)


def page_scope(user_id: int) -> Scope:
    return Scope(Page, User, "user_id", user_id)


def lock_parent_row(db: Session, scope: Scope) -> None:
    """SELECT ... FOR UPDATE sur la ligne parente (PostgreSQL, ignoré par SQLite)"""
    db.query(scope.parent_model).filter(
        scope.parent_model.id == scope.parent_id
    ).with_for_update().first()


@contextmanager
def serialized(db: Session, scope: Scope, *nested: Scope):
    """
    Exécute un bloc lecture-modification-écriture seul pour ce parent.

    Verrou en mémoire (threads du même process) + SELECT ... FOR UPDATE sur
    chaque ligne parente (plusieurs process sur PostgreSQL).
    Commit à la sortie, rollback complet sur n'importe quelle erreur.

    `nested`: scopes enfants verrouillés en plus, toujours après le parent
    (ex: pages d'un user puis blocks de la page) pour éviter les interblocages.
    Les lignes sont verrouillées dans le même ordre que les verrous en mémoire.
    """
    scopes = [scope, *nested]
    with ExitStack() as stack:
        for current in scopes:
            stack.enter_context(parent_locks.hold(current.key))
        try:
            for current in scopes:
                lock_parent_row(db, current)
            yield
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Transaction rolled back for {scope.key}")
            raise
        except Exception:
            db.rollback()
            raise


def active_items(db: Session, scope: Scope) -> List:
    return scope.active(db).order_by(scope.model.position, scope.model.id).all()


def active_count(db: Session, scope: Scope) -> int:
    return scope.active(db).count()


def append_position(db: Session, scope: Scope) -> int:
    # convention: un nouvel item va à la fin
    return active_count(db, scope)


def make_room(db: Session, scope: Scope, position: int) -> int:
    """Décale de +1 les items actifs à partir de `position` (insertion au milieu)"""
    db.flush()
    return scope.active(db).filter(scope.model.position >= position).update(
        {scope.model.position: scope.model.position + 1}, synchronize_session=False
    )


def reorder(db: Session, scope: Scope, ordered_ids: Sequence[int]) -> int:
    """
    position = index pour chaque id de la liste.

    Les ids inconnus, supprimés ou d'un autre parent ne matchent aucune ligne
    et sont ignorés sans erreur. La liste n'est pas comparée à l'ensemble
    actif: si elle est incomplète, l'invariant peut rester cassé.
    Retourne le nombre de lignes modifiées. Pas de commit ici.
    """
    updated = 0
    for index, item_id in enumerate(ordered_ids):
        updated += scope.active(db).filter(scope.model.id == item_id).update(
            {scope.model.position: index}, synchronize_session=False
        )
    if updated != len(ordered_ids):
        logger.warning(f"Reorder {scope.key}: {len(ordered_ids) - updated} id(s) ignored")
    return updated


def plan_repair(db: Session, scope: Scope, vacated: int) -> List[Tuple[int, int]]:
    """Lecture: (id, nouvelle position) pour chaque item actif après `vacated`"""
    db.flush()
    rows = scope.active(db).filter(
        scope.model.position > vacated
    ).order_by(scope.model.position).with_entities(scope.model.id, scope.model.position).all()
    return [(item_id, position - 1) for item_id, position in rows]


def apply_plan(db: Session, scope: Scope, plan: Sequence[Tuple[int, int]]) -> int:
    """Écriture: applique des positions absolues calculées par plan_repair"""
    for item_id, position in plan:
        db.query(scope.model).filter(scope.model.id == item_id).update(
            {scope.model.position: position}, synchronize_session=False
        )
    return len(plan)


def repair_positions(db: Session, scope: Scope, vacated: int) -> int:
    """Décale de -1 tous les items actifs situés après la position libérée"""
    shifted = apply_plan(db, scope, plan_repair(db, scope, vacated))
    logger.info(f"Position repair {scope.key} at {vacated}: {shifted} item(s) shifted")
    return shifted


def compact(db: Session, scope: Scope) -> int:
    """
    Réattribue 0..n-1 aux items actifs en gardant leur ordre (position, id).

    Utilisé après une suppression définitive. Avec RESTORE_POLICY=keep, un
    doublon laissé par une restauration est aussi corrigé au passage, même
    si l'item purgé n'a rien à voir avec lui.
    """
    db.flush()
    items = scope.active(db).order_by(scope.model.position, scope.model.id).populate_existing().all()
    changed = 0
    for index, item in enumerate(items):
        if item.position != index:
            item.position = index
            changed += 1
    if changed:
        db.flush()
        logger.info(f"Compacted {scope.key}: {changed} item(s) moved")
    return changed


def is_dense(positions: Sequence[int]) -> bool:
    return sorted(positions) == list(range(len(positions)))
