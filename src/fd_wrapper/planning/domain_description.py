"""
Domain Description

Accumulates the domain and problem text handed to the planner.

Domain text is built from the domain, symbol and action sections; problem
text from the problem, initial state and initial state fact sections.
Per-problem goals and rules are kept by problem name for callers that manage
several problems against one domain.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from .utils.term_types import Term

PathLike = Union[str, Path]


def _read_text(path: PathLike) -> Optional[str]:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError:
        return None


def _append(sections: Dict[str, str], name: str, text: str) -> None:
    sections[name] = sections.get(name, "") + text


def _facts_text(terms: Iterable[Term]) -> str:
    return "\n".join(term.to_pddl() for term in sorted(terms))


@dataclass
class DomainDescription:
    """
    Domain and problem sections for one planning session.

    Example:
        >>> description = DomainDescription()
        >>> description.load_domain("benchmarks/gripper/domain.pddl")
        True
        >>> description.define_problems("(define (problem p01) ...)")
        True
        >>> description.domain_text()
    """
    domain: str = ""
    symbols: str = ""
    actions: str = ""
    problems: str = ""
    initial_state: str = ""
    initial_state_facts: str = ""

    # Keyed by problem name
    problem_goals: Dict[str, str] = field(default_factory=dict)
    problem_update_rules: Dict[str, str] = field(default_factory=dict)
    problem_maintenance_rules: Dict[str, str] = field(default_factory=dict)
    problem_initial_states: Dict[str, str] = field(default_factory=dict)
    problem_initial_state_facts: Dict[str, str] = field(default_factory=dict)

    # =====================================================================
    # Clearing
    # =====================================================================

    def clear(self) -> None:
        """Clear every section."""
        self.domain = ""
        self.clear_symbols()
        self.clear_actions()
        self.clear_problems()
        self.clear_initial_state()

    def clear_symbols(self) -> None:
        self.symbols = ""

    def clear_actions(self) -> None:
        self.actions = ""

    def clear_problems(self) -> None:
        self.problems = ""
        self.problem_goals.clear()
        self.problem_update_rules.clear()
        self.problem_maintenance_rules.clear()
        self.problem_initial_states.clear()
        self.problem_initial_state_facts.clear()

    def clear_initial_state(self) -> None:
        self.initial_state = ""
        self.initial_state_facts = ""

    # =====================================================================
    # String definitions
    # =====================================================================

    def define_domain(self, text: str) -> bool:
        self.domain += text
        return True

    def define_symbols(self, text: str) -> bool:
        self.symbols += text
        return True

    def define_actions(self, text: str) -> bool:
        self.actions += text
        return True

    def define_problems(self, text: str) -> bool:
        self.problems += text
        return True

    def define_problem_goal(self, problem: str, text: str) -> bool:
        _append(self.problem_goals, problem, text)
        return True

    def define_problem_update_rules(self, problem: str, text: str) -> bool:
        _append(self.problem_update_rules, problem, text)
        return True

    def define_problem_maintenance_rules(self, problem: str, text: str) -> bool:
        _append(self.problem_maintenance_rules, problem, text)
        return True

    def define_problem_initial_state(self, problem: str, text: str) -> bool:
        _append(self.problem_initial_states, problem, text)
        return True

    def define_problem_initial_state_facts(self, problem: str, text: str) -> bool:
        _append(self.problem_initial_state_facts, problem, text)
        return True

    def define_problem_initial_state_facts_from_list(self, problem: str, terms: Iterable[Term]) -> bool:
        """Render terms as PDDL literals and append them to a problem's facts."""
        return self.define_problem_initial_state_facts(problem, _facts_text(terms))

    def define_initial_state(self, text: str) -> bool:
        self.initial_state += text
        return True

    def define_initial_state_facts(self, text: str) -> bool:
        self.initial_state_facts += text
        return True

    def define_initial_state_facts_from_list(self, terms: Iterable[Term]) -> bool:
        """Render terms as PDDL literals and append them to the initial facts."""
        return self.define_initial_state_facts(_facts_text(terms))

    # =====================================================================
    # File loading
    # =====================================================================

    def load_domain(self, path: PathLike) -> bool:
        """Replace the whole description with the domain file at ``path``."""
        text = _read_text(path)
        if text is None:
            return False
        self.clear()
        self.domain = text
        return True

    def load_symbols(self, path: PathLike) -> bool:
        text = _read_text(path)
        return text is not None and self.define_symbols(text)

    def load_actions(self, path: PathLike) -> bool:
        text = _read_text(path)
        return text is not None and self.define_actions(text)

    def load_problems(self, path: PathLike) -> bool:
        text = _read_text(path)
        return text is not None and self.define_problems(text)

    def load_problem_goal(self, path: PathLike, problem: str) -> bool:
        text = _read_text(path)
        return text is not None and self.define_problem_goal(problem, text)

    def load_problem_update_rules(self, path: PathLike, problem: str) -> bool:
        text = _read_text(path)
        return text is not None and self.define_problem_update_rules(problem, text)

    def load_problem_maintenance_rules(self, path: PathLike, problem: str) -> bool:
        text = _read_text(path)
        return text is not None and self.define_problem_maintenance_rules(problem, text)

    def load_problem_initial_state(self, path: PathLike, problem: str) -> bool:
        text = _read_text(path)
        return text is not None and self.define_problem_initial_state(problem, text)

    def load_problem_initial_state_facts(self, path: PathLike, problem: str) -> bool:
        text = _read_text(path)
        return text is not None and self.define_problem_initial_state_facts(problem, text)

    def load_initial_state(self, path: PathLike) -> bool:
        text = _read_text(path)
        return text is not None and self.define_initial_state(text)

    def load_initial_state_facts(self, path: PathLike) -> bool:
        text = _read_text(path)
        return text is not None and self.define_initial_state_facts(text)

    # =====================================================================
    # Assembled text
    # =====================================================================

    def domain_text(self) -> str:
        return self.domain + self.symbols + self.actions

    def problem_text(self) -> str:
        return self.problems + self.initial_state + self.initial_state_facts

    def has_problem(self) -> bool:
        return bool(self.domain_text().strip()) and bool(self.problem_text().strip())

    def write_files(self, output_dir: PathLike) -> Dict[str, Path]:
        """
        Write ``domain.pddl`` and ``problem.pddl`` into ``output_dir``.

        Returns:
            Dict with "domain_path" and "problem_path"
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        domain_path = output_dir / "domain.pddl"
        problem_path = output_dir / "problem.pddl"
        domain_path.write_text(self.domain_text(), encoding="utf-8")
        problem_path.write_text(self.problem_text(), encoding="utf-8")

        return {"domain_path": domain_path, "problem_path": problem_path}
