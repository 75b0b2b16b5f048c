"""
Crawl Result - Visit records, link states and the final report
"""

import time
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Union, Hashable

from ..utils.error_handler import FetchFailure, ResolutionError


class LinkState(Enum):
    """Terminal classification of a link"""
    OK = "OK"
    BROKEN = "BROKEN"
    SKIPPED = "SKIPPED"


class VisitState(Enum):
    """Lifecycle of a visit record"""
    QUEUED = "QUEUED"
    FETCHING = "FETCHING"
    OK = "OK"
    BROKEN = "BROKEN"
    SKIPPED = "SKIPPED"

    @property
    def is_terminal(self) -> bool:
        return self in (VisitState.OK, VisitState.BROKEN, VisitState.SKIPPED)


@dataclass
class VisitRecord:
    """Everything the crawl knows about one canonical URL"""
    key: Hashable
    url: str
    link: str
    sequence: int
    parent: Optional[str] = None
    crawl: bool = False
    state: VisitState = VisitState.QUEUED
    status: Optional[int] = None
    failure: Optional[Union[FetchFailure, ResolutionError]] = None
    discovered_at: float = field(default_factory=time.time)

    def start(self):
        if self.state is not VisitState.QUEUED:
            raise RuntimeError(f"{self.key} cannot start from {self.state.value}")
        self.state = VisitState.FETCHING

    def finish(self, state: LinkState, status: Optional[int] = None, failure=None):
        """Move to a terminal state; terminal states never change again"""
        if self.state.is_terminal:
            raise RuntimeError(f"{self.key} is already {self.state.value}")
        self.state = VisitState(state.value)
        self.status = status
        self.failure = failure

    @property
    def link_state(self) -> Optional[LinkState]:
        if not self.state.is_terminal:
            return None
        return LinkState(self.state.value)

    def to_result(self) -> 'LinkResult':
        return LinkResult(
            url=self.url,
            state=self.link_state,
            status=self.status,
            parent=self.parent,
            failure=str(self.failure) if self.failure is not None else None
        )


@dataclass(frozen=True)
class LinkResult:
    """One line of the report"""
    url: str
    state: LinkState
    status: Optional[int] = None
    parent: Optional[str] = None
    failure: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'url': self.url, 'state': self.state.value}
        if self.status is not None:
            data['status'] = self.status
        if self.parent is not None:
            data['parent'] = self.parent
        if self.failure is not None:
            data['failure'] = self.failure
        return data


@dataclass(frozen=True)
class Report:
    """Outcome of a crawl"""
    passed: bool
    links: List[LinkResult]

    def by_state(self, state: LinkState) -> List[LinkResult]:
        return [link for link in self.links if link.state is state]

    @property
    def broken(self) -> List[LinkResult]:
        return self.by_state(LinkState.BROKEN)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'passed': self.passed,
            'links': [link.to_dict() for link in self.links]
        }


class ResultAggregator:
    """Collects terminal visit records and builds the report once"""

    def __init__(self):
        self._records: List[VisitRecord] = []
        self._report: Optional[Report] = None

    def record(self, record: VisitRecord):
        if record.link_state is None:
            raise ValueError(f"{record.key} is not finished ({record.state.value})")
        if self._report is not None:
            raise RuntimeError("report already finalized")
        self._records.append(record)

    def __len__(self):
        return len(self._records)

    def finalize(self) -> Report:
        """Build the report in discovery order; a single broken link fails it"""
        if self._report is None:
            ordered = sorted(self._records, key=lambda r: r.sequence)
            links = [r.to_result() for r in ordered]
            passed = all(link.state is not LinkState.BROKEN for link in links)
            self._report = Report(passed=passed, links=links)
        return self._report
