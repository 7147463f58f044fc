from __future__ import annotations

from dataclasses import dataclass

from motutor.chem.configuration import format_bond_order, ground_state, summarize
from motutor.chem.molecules import get_molecule


@dataclass(frozen=True)
class ChallengeItem:
    molecule_id: str
    formula: str
    bond_order: float
    stability_score: float


@dataclass(frozen=True)
class ChallengeResult:
    ok: bool
    message: str
    expected: list[str]


def challenge_items(molecule_ids: list[str]) -> list[ChallengeItem]:
    items: list[ChallengeItem] = []
    for molecule_id in molecule_ids:
        molecule = get_molecule(molecule_id)
        stats = summarize(ground_state(molecule))
        items.append(
            ChallengeItem(
                molecule_id=molecule.id,
                formula=molecule.formula,
                bond_order=stats.bond_order,
                stability_score=stats.bond_order,
            )
        )
    return items


def rank_by_stability(molecule_ids: list[str]) -> list[ChallengeItem]:
    # sorted() is stable, so equal bond orders keep the order they were given in.
    return sorted(challenge_items(molecule_ids), key=lambda item: -item.stability_score)


def grade_stability_order(answer_ids: list[str]) -> ChallengeResult:
    """Grade a most-stable-first ordering; species with equal bond order may swap."""
    items = challenge_items(answer_ids)
    expected = [item.molecule_id for item in rank_by_stability(answer_ids)]
    for first, second in zip(items, items[1:]):
        if first.stability_score < second.stability_score:
            return ChallengeResult(
                ok=False,
                message=(
                    f"{second.formula} (bond order {format_bond_order(second.bond_order)}) is more stable "
                    f"than {first.formula} (bond order {format_bond_order(first.bond_order)})."
                ),
                expected=expected,
            )
    ranking = " > ".join(item.formula for item in items)
    return ChallengeResult(ok=True, message=f"Correct! Stability order: {ranking}.", expected=expected)
