"""
Plan Session

Runs Fast Downward for one problem, reads back its answer file and exposes
the resulting plan through a cursor.

The answer file alternates state and action lines, starting with the initial
state:

    ; comment lines are ignored
    (at-robby(rooma) free(left) ...)
    (pick ball1 rooma left)
    (at-robby(rooma) carry(ball1,left) ...)

so a plan with ``n`` actions always carries ``n + 1`` states, ``states[i]``
holding before ``actions[i]`` and ``states[i + 1]`` after it.
"""

import asyncio
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import AbstractSet, Any, List, Optional, Union

from ..planner_config import PlannerConfig
from ..utils.logging_utils import get_structured_logger
from .action_model import ActionModel, UncheckedActionModel
from .domain_description import DomainDescription
from .process_supervisor import ProcessSupervisor, RunOutcome, RunStatus
from .state_delta import StateDelta, state_difference
from .term_parser import MalformedLineError, is_comment, parse_action, parse_state
from .utils.term_types import EMPTY_STATE, END_OF_PLAN, State, Term, format_state

PathLike = Union[str, Path]


class PlanStatus(Enum):
    """Outcome of a planning request."""
    SUCCESS = "success"
    LAUNCH_FAILURE = "launch-failure"  # Planner could not be started
    TIMEOUT = "timeout"  # Planner exceeded its deadline
    MALFORMED_ARTIFACT = "malformed-artifact"  # Answer file missing, empty or unparsable
    NO_PROBLEM = "no-problem"  # Nothing to plan for
    PROBLEM_WRITE_FAILURE = "problem-write-failure"  # Generated domain/problem files could not be written


class MalformedArtifactError(ValueError):
    """Raised while reading an answer file that is missing or breaks the grammar."""

    def __init__(self, message: str, path: Path, line_number: Optional[int] = None):
        self.path = path
        self.line_number = line_number
        where = f"{path}:{line_number}" if line_number is not None else str(path)
        super().__init__(f"{where}: {message}")


@dataclass
class PlanResult:
    """Result of a planning request."""
    status: PlanStatus
    actions: List[Term] = field(default_factory=list)
    states: List[State] = field(default_factory=list)
    run: Optional[RunOutcome] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == PlanStatus.SUCCESS

    @property
    def plan_length(self) -> int:
        return len(self.actions)

    def __bool__(self):
        return self.success

    def __str__(self):
        if not self.success:
            return f"Planning failed ({self.status.value}): {self.error_message}"
        result = f"Plan found ({self.plan_length} steps"
        if self.run is not None:
            result += f", time: {self.run.elapsed:.2f}s"
        return result + ")"


_RUN_FAILURES = {
    RunStatus.LAUNCH_FAILURE: PlanStatus.LAUNCH_FAILURE,
    RunStatus.TIMEOUT: PlanStatus.TIMEOUT,
}


def read_plan_file(path: PathLike) -> PlanResult:
    """
    Parse an answer file into states and actions.

    Raises:
        MalformedArtifactError: file missing, empty, unparsable, or ending
            on an action line
    """
    path = Path(path)
    states: List[State] = []
    actions: List[Term] = []
    expect_state = True

    try:
        with open(path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")
                if is_comment(line) or not line.strip():
                    continue
                try:
                    if expect_state:
                        states.append(parse_state(line))
                    else:
                        actions.append(parse_action(line))
                except MalformedLineError as e:
                    raise MalformedArtifactError(str(e), path, line_number) from e
                expect_state = not expect_state
    except OSError as e:
        raise MalformedArtifactError(f"cannot read answer file ({e.strerror or e})", path) from e

    if not states:
        raise MalformedArtifactError("answer file holds no states", path)
    if len(states) != len(actions) + 1:
        raise MalformedArtifactError("answer file ends after an action, final state missing", path)

    return PlanResult(status=PlanStatus.SUCCESS, actions=actions, states=states)


class PlanSession:
    """
    One planner instance plus the plan it last produced.

    Example:
        >>> session = PlanSession("/opt/fast-downward")
        >>> result = session.plan("/opt/fast-downward/benchmarks/gripper/prob01.pddl", timeout=5)
        >>> if result:
        ...     session.reset_plan()
        ...     while not session.is_end_of_plan():
        ...         print(session.get_plan_action())
        ...         session.advance_plan()

    A session is not safe for concurrent use; give each planning agent its own.
    """

    def __init__(
        self,
        planner_dir: PathLike,
        launcher_script: str = "fast-downward.py",
        python_executable: str = "/usr/bin/python",
        *,
        config: Optional[PlannerConfig] = None,
        description: Optional[DomainDescription] = None,
        action_model: Optional[ActionModel] = None,
        supervisor: Optional[ProcessSupervisor] = None,
    ):
        """
        Initialize a planning session.

        Args:
            planner_dir: Fast Downward checkout; also where the answer file appears
            launcher_script: Launcher inside ``planner_dir``
            python_executable: Interpreter used to run the launcher
            config: Full configuration; overrides the three arguments above
            description: Domain/problem text used by ``build_plan``
            action_model: Domain semantics for precondition/effect queries
            supervisor: Process supervisor (a fresh one by default)
        """
        if config is None:
            config = PlannerConfig(
                planner_dir=Path(planner_dir),
                launcher_script=launcher_script,
                python_executable=python_executable,
            )
        self.config = config
        self._default_config = config.copy()
        self.description = description if description is not None else DomainDescription()
        self.action_model: ActionModel = action_model if action_model is not None else UncheckedActionModel()
        self.supervisor = supervisor if supervisor is not None else ProcessSupervisor()
        self.logger = get_structured_logger("PlanSession")

        self.problem_file: Optional[Path] = None
        self.last_result: Optional[PlanResult] = None

        self._actions: List[Term] = []
        self._states: List[State] = []
        self._plan_valid = False
        self._pointer = 0

    @classmethod
    def from_config(cls, config: PlannerConfig, **kwargs: Any) -> "PlanSession":
        return cls(config.planner_dir, config=config, **kwargs)

    # =====================================================================
    # Configuration
    # =====================================================================

    def reset(self) -> None:
        """Restore construction-time settings and drop plan, problem and description."""
        self.config = self._default_config.copy()
        self.description.clear()
        self.problem_file = None
        self.last_result = None
        self.clear_plan()

    def get_planner_property(self, name: str) -> str:
        return self.config.get_property(name)

    def set_planner_property(self, name: str, value: Any) -> bool:
        return self.config.set_property(name, value)

    def set_plan_problem(self, problem_file: PathLike) -> bool:
        """Select the problem file used by ``build_plan``."""
        path = Path(os.path.abspath(problem_file))
        if not path.is_file():
            self.logger.error("Problem file not found: %s", path)
            return False
        self.problem_file = path
        return True

    def clear_domain(self) -> None:
        self.description.clear()

    # =====================================================================
    # Planning
    # =====================================================================

    def build_plan(self) -> PlanResult:
        """Plan for the selected problem using the session's configuration."""
        return asyncio.run(self.build_plan_async())

    async def build_plan_async(self) -> PlanResult:
        self.clear_plan()

        try:
            problem_file = self._resolve_problem_file()
        except OSError as e:
            result = PlanResult(
                status=PlanStatus.PROBLEM_WRITE_FAILURE,
                error_message=f"Cannot write domain/problem files to {self.config.effective_problem_dir}: {e}",
            )
            self.logger.error("%s", result.error_message)
            self.last_result = result
            return result

        if problem_file is None:
            result = PlanResult(
                status=PlanStatus.NO_PROBLEM,
                error_message="No problem selected and no domain/problem description defined",
            )
            self.logger.error("%s", result.error_message)
            self.last_result = result
            return result

        return await self.plan_async(problem_file, self.config.timeout, self.config.kill_signal)

    def plan(self, problem_file: PathLike, timeout: Optional[float] = None, kill_signal: Optional[int] = None) -> PlanResult:
        """
        Run the planner on ``problem_file`` and load the plan it writes.

        Blocks for at most ``timeout`` seconds plus the time the planner takes
        to die after the termination signal.
        """
        return asyncio.run(self.plan_async(problem_file, timeout, kill_signal))

    async def plan_async(
        self,
        problem_file: PathLike,
        timeout: Optional[float] = None,
        kill_signal: Optional[int] = None,
    ) -> PlanResult:
        if timeout is None:
            timeout = self.config.timeout
        if kill_signal is None:
            kill_signal = self.config.kill_signal

        self.clear_plan()
        result_path = self.config.result_path
        # An answer left over from an earlier run must never be mistaken for this one
        if result_path.exists():
            result_path.unlink()

        outcome = await self.supervisor.run_async(
            self.config.python_executable,
            self.config.planner_arguments(problem_file),
            timeout,
            termination_signal=kill_signal,
            cwd=self.config.planner_dir,
            output_path=self.config.planner_log_file,
        )

        if not outcome.completed_normally:
            result = PlanResult(
                status=_RUN_FAILURES[outcome.status],
                run=outcome,
                error_message=outcome.error_message,
            )
            self.logger.error("Planner run failed: %s", outcome)
            self.last_result = result
            return result

        if outcome.returncode:
            self.logger.warning("Planner exited with code %d", outcome.returncode)

        self.logger.info("reading solution from %s", result_path)
        try:
            result = read_plan_file(result_path)
        except MalformedArtifactError as e:
            result = PlanResult(status=PlanStatus.MALFORMED_ARTIFACT, run=outcome, error_message=str(e))
            self.logger.error("%s", e)
            self.last_result = result
            return result

        result.run = outcome
        self._commit(result)
        self.logger.info("%s", result)
        return result

    def _resolve_problem_file(self) -> Optional[Path]:
        if self.problem_file is not None:
            return self.problem_file
        if self.description.has_problem():
            paths = self.description.write_files(self.config.effective_problem_dir)
            return paths["problem_path"]
        return None

    def _commit(self, result: PlanResult) -> None:
        for i, state in enumerate(result.states):
            self.logger.debug("state: %s", format_state(state))
            if i < len(result.actions):
                self.logger.debug("action: %s", result.actions[i])

        self._states = list(result.states)
        self._actions = list(result.actions)
        self._pointer = 0
        self._plan_valid = True
        self.last_result = result

    # =====================================================================
    # Plan cursor
    # =====================================================================

    def clear_plan(self) -> None:
        self._actions = []
        self._states = []
        self._plan_valid = False
        self._pointer = 0

    def reset_plan(self) -> None:
        """Move the cursor back to the first action."""
        self._pointer = 0

    def get_plan(self) -> List[Term]:
        return list(self._actions)

    def get_plan_states(self) -> List[State]:
        return list(self._states)

    def is_plan_defined(self) -> bool:
        return self._plan_valid

    def is_end_of_plan(self) -> bool:
        return self._pointer >= len(self._actions)

    def advance_plan(self) -> None:
        """Move to the next action; check ``is_end_of_plan`` before reading."""
        self._pointer += 1

    @property
    def plan_pointer(self) -> int:
        return self._pointer

    def get_plan_action(self) -> Term:
        """Current action, or ``END_OF_PLAN``. Does not advance the cursor."""
        if self.is_end_of_plan():
            return END_OF_PLAN
        return self._actions[self._pointer]

    def get_plan_state(self) -> State:
        """State expected after the current action, empty at end of plan."""
        if self.is_end_of_plan():
            return EMPTY_STATE
        return self._states[self._pointer + 1]

    def get_plan_initial_state(self) -> State:
        if not self._states:
            return EMPTY_STATE
        return self._states[0]

    def get_domain_initial_state(self) -> State:
        return self.get_plan_initial_state()

    def get_domain_problem_initial_state(self) -> State:
        return self.get_plan_initial_state()

    # =====================================================================
    # Action semantics
    # =====================================================================

    def check_plan_action_preconditions(self, state: AbstractSet[Term]) -> bool:
        """Check the current action's preconditions against ``state``."""
        return self.action_model.check_preconditions(self.get_plan_action(), state)

    def get_plan_action_effects(self, state: AbstractSet[Term]) -> StateDelta:
        """Effects of the current action applied to ``state``."""
        return self.action_model.effects(self.get_plan_action(), state)

    def get_plan_action_effects_state(self, state: AbstractSet[Term]) -> State:
        """State reached by applying the current action's effects to ``state``."""
        return self.get_plan_action_effects(state).apply(state)

    def get_state_difference(self, s1: AbstractSet[Term], s2: AbstractSet[Term]) -> StateDelta:
        return state_difference(s1, s2)
