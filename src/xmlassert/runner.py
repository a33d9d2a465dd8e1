from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from xmlassert.assertions import AssertionOutcome, XmlAssertion
from xmlassert.assertions.pool import ValidatorPool
from xmlassert.config import CaseConfig, SuiteConfig
from xmlassert.mock import MockFunction
from xmlassert.variables import UnboundVariable, VariableStore
from xmlassert.verbose import close_logger, setup_logger


@dataclass
class CaseResult:
    case: str
    outcomes: list[AssertionOutcome]

    @property
    def all_passed(self) -> bool:
        return all(o.passed for o in self.outcomes)

    @property
    def has_errors(self) -> bool:
        return any(o.is_error for o in self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "all_passed": self.all_passed,
            "assertions": [o.to_dict() for o in self.outcomes],
        }


class Runner:
    """Runs an assertion suite on a pool of worker threads.

    Cases are dealt round-robin into ``parallel`` lanes and each lane runs on
    its own worker, one case at a time. When a lane is done the worker's
    validator handle is released.
    """

    def __init__(
        self,
        config: SuiteConfig,
        output_dir: Path,
        verbose: bool = False,
        parallel: int = 1,
        pool: ValidatorPool | None = None,
        variables: VariableStore | None = None,
    ):
        self.config = config
        self.output_dir = output_dir
        self.verbose = verbose
        self.parallel = parallel
        self.pool = pool if pool is not None else ValidatorPool()
        self.variables = variables if variables is not None else VariableStore()
        self.results: list[CaseResult] = []

    @property
    def all_passed(self) -> bool:
        return all(r.all_passed for r in self.results)

    def execute(self) -> Path:
        """Run every case. Returns the run directory."""
        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = setup_logger(
            run_dir / "debug.log",
            verbose=self.verbose,
            logger_name=f"xmlassert_run_{uuid.uuid4().hex[:8]}",
        )
        logger.debug("Starting assertion run")

        cases = self.config.cases
        lanes = [cases[i :: self.parallel] for i in range(self.parallel)]
        lanes = [lane for lane in lanes if lane]
        print(f"Running {len(cases)} case(s) with parallelism {self.parallel}...")

        by_case: dict[str, CaseResult] = {}
        try:
            with ThreadPoolExecutor(max_workers=self.parallel) as executor:
                futures = [
                    executor.submit(self._run_lane, lane, logger) for lane in lanes
                ]
                for future in as_completed(futures):
                    for result in future.result():
                        by_case[result.case] = result

            self.results = [by_case[case.name] for case in cases]
            for index, result in enumerate(self.results, start=1):
                n_passed = sum(1 for o in result.outcomes if o.passed)
                status = "PASS" if result.all_passed else "FAIL"
                if result.has_errors:
                    status = "ERROR"
                print(
                    f"  [{index}/{len(cases)}] {status}  {result.case} "
                    f"({n_passed}/{len(result.outcomes)} assertions)"
                )

            self._write_results(run_dir)
        finally:
            close_logger(logger)

        return run_dir

    def _run_lane(self, cases: list[CaseConfig], logger: logging.Logger) -> list[CaseResult]:
        worker = threading.get_ident()
        logger.debug(f"Worker {worker} started with {len(cases)} case(s)")
        started: list[XmlAssertion] = []
        try:
            return [self._run_case(case, logger, started) for case in cases]
        finally:
            # every hook runs; only the first finds a reader to release
            released = [assertion.thread_finished() for assertion in started]
            if any(released):
                logger.debug(f"Worker {worker} finished, validator released")

    def _run_case(
        self,
        case: CaseConfig,
        logger: logging.Logger,
        started: list[XmlAssertion],
    ) -> CaseResult:
        logger.debug(f"Running case '{case.name}'")
        # case-local scope so parallel lanes never see each other's mock values
        scope = VariableStore(self.variables.snapshot())
        try:
            mock = MockFunction(scope, logger=logger)
            produced = {
                name: mock.execute(spec, name=name)
                for name, spec in case.variables.items()
                if spec.strip()
            }
            body = scope.expand(case.read_body())
        except (OSError, ValueError, UnboundVariable) as e:
            logger.error(f"Case '{case.name}' setup failed: {e}")
            return CaseResult(
                case=case.name,
                outcomes=[
                    AssertionOutcome.error(a.name, f"case setup failed: {e}")
                    for a in case.assertions
                ],
            )

        outcomes = []
        for assertion_config in case.assertions:
            if assertion_config.expected is not None:
                try:
                    expected = scope.expand(assertion_config.expected)
                except UnboundVariable as e:
                    outcomes.append(AssertionOutcome.error(assertion_config.name, str(e)))
                    continue
                assertion_config = assertion_config.model_copy(update={"expected": expected})
            assertion = XmlAssertion(assertion_config, pool=self.pool, logger=logger)
            assertion.thread_started()
            started.append(assertion)
            outcomes.append(assertion.evaluate(body))

        for name, value in produced.items():
            self.variables.put(name, value)

        result = CaseResult(case=case.name, outcomes=outcomes)
        logger.debug(
            f"Case '{case.name}' completed: "
            f"{sum(1 for o in outcomes if o.passed)}/{len(outcomes)} assertions passed"
        )
        return result

    def _write_results(self, run_dir: Path) -> None:
        results: dict[str, Any] = {
            "run_id": run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "parallel": self.parallel,
            "all_passed": self.all_passed,
            "cases": {r.case: r.to_dict() for r in self.results},
        }
        (run_dir / "results.yaml").write_text(
            yaml.safe_dump(results, default_flow_style=False, sort_keys=False)
        )
