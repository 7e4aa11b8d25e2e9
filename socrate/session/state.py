"""
Explicit per-session state shared by the conversation and Socratic controllers.
"""

import itertools
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Iterator

from socrate.core.models import Turn, Problem, SocraticTurn, Insight
from socrate.shared.exceptions import ProblemNotFoundError


VIEW_FIND = "find"
VIEW_SOCRATIC = "socratic"
VIEW_DIARY = "diary"


@dataclass
class SessionState:
    """Everything one user sees in one browser tab or terminal."""
    session_id: str
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)
    active_view: str = VIEW_FIND

    conversation: List[Turn] = field(default_factory=list)
    problems: List[Problem] = field(default_factory=list)
    socratic: List[SocraticTurn] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)

    # Weak reference: resolved against `problems` on every access
    selected_problem_id: Optional[int] = None

    conversation_busy: bool = False
    socratic_busy: bool = False
    awaiting_insight: bool = False

    # Monotonic deadline of the transient "copied" flag
    copied_until: Optional[float] = None

    _problem_ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)
    _insight_ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def touch(self):
        self.last_activity = datetime.now()

    def add_problem(self, text: str) -> Problem:
        """Append a new pending problem; duplicates are kept."""
        problem = Problem(id=next(self._problem_ids), text=text)
        self.problems.append(problem)
        return problem

    def find_problem(self, problem_id: int) -> Optional[Problem]:
        for problem in self.problems:
            if problem.id == problem_id:
                return problem
        return None

    def get_problem(self, problem_id: int) -> Problem:
        problem = self.find_problem(problem_id)
        if problem is None:
            raise ProblemNotFoundError(f"Problem {problem_id} not found")
        return problem

    def edit_problem(self, problem_id: int, text: str) -> Problem:
        problem = self.get_problem(problem_id)
        problem.text = text
        return problem

    def delete_problem(self, problem_id: int) -> Problem:
        problem = self.get_problem(problem_id)
        self.problems.remove(problem)
        return problem

    @property
    def selected_problem(self) -> Optional[Problem]:
        if self.selected_problem_id is None:
            return None
        return self.find_problem(self.selected_problem_id)

    def add_insight(self, text: str, problem: Problem) -> Insight:
        insight = Insight(
            id=next(self._insight_ids),
            text=text,
            problem_id=problem.id,
            problem_text=problem.text,
        )
        self.insights.append(insight)
        return insight
