"""
Family sub-form state for the onboarding form.

The marital status selects which family branch is active: an unmarried
applicant lists siblings, a married applicant gives a spouse and children.
FamilyState keeps both branches so switching back and forth does not lose
typing, but everything that leaves this module (context, to_form_data)
only exposes the active branch.

All operations are pure: they return a new FamilyState and raise
FamilyListError without touching the input when an edit is rejected.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import FamilyListError
from .schema import CHILD_GENDERS, EMPLOYMENT_STATUSES, MARITAL_STATUSES, MARRIED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FamilyMember:
    """A sibling or spouse entry. Statuses are empty until chosen."""
    name: str
    marital_status: str = ""
    employment_status: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.marital_status and self.employment_status)


@dataclass(frozen=True)
class Child:
    name: str
    gender: str
    dob: Optional[date] = None


@dataclass(frozen=True)
class Unmarried:
    siblings: Tuple[FamilyMember, ...] = ()


@dataclass(frozen=True)
class Married:
    spouse: FamilyMember = field(default_factory=lambda: FamilyMember(""))
    children: Tuple[Child, ...] = ()


FamilyContext = Union[Unmarried, Married]


@dataclass(frozen=True)
class FamilyState:
    """
    Family data for one form visit.

    Attributes:
        marital_status: "", "Single" or "Married"
        siblings: Sibling entries (active when not married)
        spouse: Spouse entry (active when married)
        children: Child entries (active when married)
        selected_sibling: Name of the sibling loaded into the edit pane
        edit_marital_status: Marital status shown in the edit pane
        edit_employment_status: Employment status shown in the edit pane
    """
    marital_status: str = ""
    siblings: Tuple[FamilyMember, ...] = ()
    spouse: FamilyMember = field(default_factory=lambda: FamilyMember(""))
    children: Tuple[Child, ...] = ()
    selected_sibling: str = ""
    edit_marital_status: str = ""
    edit_employment_status: str = ""

    @property
    def is_married(self) -> bool:
        return self.marital_status == MARRIED

    @property
    def context(self) -> FamilyContext:
        """The active family branch."""
        if self.is_married:
            return Married(spouse=self.spouse, children=self.children)
        return Unmarried(siblings=self.siblings)

    def sibling_names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.siblings)

    def find_sibling(self, name: str) -> Optional[FamilyMember]:
        for sibling in self.siblings:
            if sibling.name == name:
                return sibling
        return None

    def to_form_data(self) -> Dict[str, Any]:
        """Family fields for schema validation, active branch only."""
        return context_to_form_data(self.marital_status, self.context)


def context_to_form_data(marital_status: str, context: FamilyContext) -> Dict[str, Any]:
    """Serialize a family context to snake_case form data."""
    data: Dict[str, Any] = {'marital_status': marital_status or None}

    if isinstance(context, Married):
        data['spouse'] = {
            'name': context.spouse.name,
            'employment_status': context.spouse.employment_status or None,
        }
        data['children'] = [
            {'name': c.name, 'gender': c.gender or None, 'dob': c.dob}
            for c in context.children
        ]
    else:
        data['siblings'] = [
            {
                'name': s.name,
                'marital_status': s.marital_status or None,
                'employment_status': s.employment_status or None,
            }
            for s in context.siblings
        ]

    return data


def set_marital_status(state: FamilyState, status: Optional[str]) -> FamilyState:
    """Switch the active branch. Inactive branch data is kept but never submitted."""
    status = status or ""
    if status and status not in MARITAL_STATUSES:
        raise ValueError(f"Unknown marital status: {status}")
    if status != state.marital_status:
        logger.info(f"Marital status changed: {state.marital_status or '-'} -> {status or '-'}")
    return replace(state, marital_status=status)


def add_sibling(state: FamilyState, name: str) -> FamilyState:
    """Append a sibling with empty statuses."""
    name = (name or "").strip()
    if not name:
        raise FamilyListError("Please enter sibling name")

    if any(s.name.lower() == name.lower() for s in state.siblings):
        raise FamilyListError("Sibling already exists", member_name=name)

    logger.debug(f"Adding sibling: {name}")
    return replace(state, siblings=state.siblings + (FamilyMember(name),))


def select_sibling(state: FamilyState, name: Optional[str]) -> FamilyState:
    """Load a sibling's statuses into the edit pane."""
    name = name or ""
    sibling = state.find_sibling(name) if name else None
    if sibling is None:
        return replace(state, selected_sibling=name, edit_marital_status="", edit_employment_status="")

    return replace(
        state,
        selected_sibling=name,
        edit_marital_status=sibling.marital_status,
        edit_employment_status=sibling.employment_status,
    )


def save_sibling_details(
    state: FamilyState,
    marital_status: Optional[str],
    employment_status: Optional[str]
) -> FamilyState:
    """Write the edit-pane statuses onto the selected sibling."""
    if not state.selected_sibling or state.find_sibling(state.selected_sibling) is None:
        raise FamilyListError("Please select a sibling to edit")

    if not marital_status or not employment_status:
        raise FamilyListError("Please select both statuses for the sibling", member_name=state.selected_sibling)

    if marital_status not in MARITAL_STATUSES or employment_status not in EMPLOYMENT_STATUSES:
        raise FamilyListError("Please select both statuses for the sibling", member_name=state.selected_sibling)

    siblings = tuple(
        replace(s, marital_status=marital_status, employment_status=employment_status)
        if s.name == state.selected_sibling else s
        for s in state.siblings
    )
    logger.debug(f"Saved details for sibling {state.selected_sibling}")
    return replace(
        state,
        siblings=siblings,
        edit_marital_status=marital_status,
        edit_employment_status=employment_status,
    )


def remove_sibling(state: FamilyState, index: int) -> FamilyState:
    """Delete a sibling by index, clearing the selection if it was selected."""
    if not 0 <= index < len(state.siblings):
        raise IndexError(f"Sibling index out of range: {index}")

    removed = state.siblings[index]
    siblings = state.siblings[:index] + state.siblings[index + 1:]
    new_state = replace(state, siblings=siblings)

    if state.selected_sibling and removed.name == state.selected_sibling:
        new_state = replace(new_state, selected_sibling="", edit_marital_status="", edit_employment_status="")

    logger.debug(f"Removed sibling: {removed.name}")
    return new_state


def update_spouse(state: FamilyState, name: Optional[str] = None,
                  employment_status: Optional[str] = None) -> FamilyState:
    """Set the spouse record. Arguments left as None keep their current value."""
    spouse = state.spouse
    if name is not None:
        spouse = replace(spouse, name=name.strip())
    if employment_status is not None:
        spouse = replace(spouse, employment_status=employment_status)
    if spouse == state.spouse:
        return state
    return replace(state, spouse=spouse)


def add_child(state: FamilyState, name: str, gender: Optional[str], dob: Optional[date] = None) -> FamilyState:
    """Append a child; name and gender are required."""
    name = (name or "").strip()
    if not name:
        raise FamilyListError("Please enter child name")
    if gender not in CHILD_GENDERS:
        raise FamilyListError("Please select child gender", member_name=name)

    logger.debug(f"Adding child: {name}")
    return replace(state, children=state.children + (Child(name=name, gender=gender, dob=dob),))


def remove_child(state: FamilyState, index: int) -> FamilyState:
    if not 0 <= index < len(state.children):
        raise IndexError(f"Child index out of range: {index}")
    return replace(state, children=state.children[:index] + state.children[index + 1:])
