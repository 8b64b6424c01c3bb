"""
Interface lifecycle.

Startup is a linear pipeline of fallible steps. Each step runs only if every
step before it succeeded; the first failure ends the pipeline and nothing is
rolled back. Once the interface is up, the reconciliation loop takes over.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .apply import apply_interface_config
from .bootstrap import init_interface_config
from .config import RuntimeConfig
from .exceptions import MonitorError, StartupError, WgLanError
from .firewall import set_forward_policy
from .interface import create_interface, set_interface_up
from .kernel import load_module
from .reconcile import ChangeSource, ReconciliationLoop

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """One startup step."""

    name: str
    description: str  # Completes "unable to ..."
    run: Callable[[RuntimeConfig], object]


@dataclass(frozen=True)
class StepResult:
    """Outcome of a single step."""

    step: Step
    ok: bool
    error: Optional[WgLanError] = None

    @property
    def name(self) -> str:
        return self.step.name


def startup_steps() -> List[Step]:
    """The ordered startup sequence."""
    return [
        Step("load_module", "load the wireguard module", load_module),
        Step("create_interface", "setup the interface", create_interface),
        Step("set_forward_policy", "configure the iptables", set_forward_policy),
        Step("init_config", "initialize the config", init_interface_config),
        Step("apply_config", "apply the initial config", apply_interface_config),
        Step("set_interface_up", "set the interface to be up", set_interface_up),
    ]


def run_step(step: Step, config: RuntimeConfig) -> StepResult:
    """Run one step, turning a wglan error into a failed result."""
    logger.debug(f"Running step {step.name}")
    try:
        step.run(config)
    except WgLanError as e:
        return StepResult(step=step, ok=False, error=e)
    return StepResult(step=step, ok=True)


def run_pipeline(steps: Iterable[Step], config: RuntimeConfig) -> List[StepResult]:
    """
    Run steps in order, stopping at the first failure.

    Returns:
        Results of every step that ran; only the last one can have failed
    """
    results: List[StepResult] = []
    for step in steps:
        result = run_step(step, config)
        results.append(result)
        if not result.ok:
            logger.debug(f"Step {step.name} failed, aborting startup")
            break
    return results


def start_interface(
    config: RuntimeConfig,
    steps: Optional[List[Step]] = None,
) -> List[StepResult]:
    """
    Bring the interface from absent to configured and up.

    Raises:
        StartupError: Wrapping the first failing step's error
    """
    steps = startup_steps() if steps is None else steps
    results = run_pipeline(steps, config)

    failed = results[-1] if results and not results[-1].ok else None
    if failed is not None:
        raise StartupError(failed.step.name, failed.step.description, failed.error) from failed.error

    return results


def run_server(
    config: RuntimeConfig,
    source: ChangeSource,
    steps: Optional[List[Step]] = None,
) -> None:
    """
    Run the startup sequence, then reconcile config changes until an error.

    Raises:
        StartupError: If any startup step fails
        MonitorError: If the reconciliation loop fails
    """
    start_interface(config, steps)
    logger.info("initialization complete, starting the config monitoring")

    loop = ReconciliationLoop(config, source)
    try:
        loop.run()
    except WgLanError as e:
        raise MonitorError(e) from e
