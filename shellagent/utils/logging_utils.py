"""Logging utilities for shellagent."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union


def setup_logging(level: int = logging.INFO, log_dir: Union[str, Path] = "logs") -> logging.Logger:
    """Setup logging configuration for shellagent.

    Args:
        level: Level for the file handler (default: INFO)
        log_dir: Directory receiving the timestamped log file

    Returns:
        Configured package logger
    """
    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"shellagent_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    logger = logging.getLogger("shellagent")
    logger.setLevel(logging.DEBUG)  # child loggers filter at the handlers
    logger.propagate = False

    logger.handlers = []

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info("=" * 80)
    logger.info("shellagent started")
    logger.info(f"Log file: {log_file}")
    logger.info("=" * 80)

    return logger


def log_state_transition(
    logger: logging.Logger,
    session_id: str,
    from_state: Optional[str],
    to_state: str,
    detail: Optional[str] = None,
) -> None:
    """Log a session state machine transition.

    Args:
        logger: Logger instance
        session_id: Session whose state changed
        from_state: Previous state (None when the session is new)
        to_state: New state
        detail: Human-readable reason carried on the event
    """
    logger.info(f"[{session_id[:8]}] state {from_state or 'idle'} → {to_state}")
    if detail:
        logger.debug(f"  Detail: {detail}")


def log_tool_call(logger: logging.Logger, session_id: str, tool_call_id: str, command: str) -> None:
    logger.info(f"[{session_id[:8]}] Command approved: {tool_call_id}")
    logger.debug(f"  Command: {command}")


def log_tool_result(logger: logging.Logger, tool_call_id: str, result: Any, success: bool = True) -> None:
    """Log command execution result.

    Args:
        logger: Logger instance
        tool_call_id: Proposal identifier
        result: Execution result or error text
        success: Whether the execution succeeded
    """
    status = "✓ Success" if success else "✗ Failed"
    logger.info(f"Command result: {tool_call_id} - {status}")

    result_str = str(result)
    if len(result_str) > 500:
        result_str = result_str[:500] + "... (truncated)"
    logger.debug(f"  Result: {result_str}")


def log_error(logger: logging.Logger, error: Exception, context: str = "") -> None:
    """Log error with context.

    Args:
        logger: Logger instance
        error: Exception instance
        context: Additional context about where the error occurred
    """
    logger.error(f"Error occurred: {type(error).__name__}: {str(error)}")
    if context:
        logger.error(f"  Context: {context}")
    logger.exception("Full traceback:", exc_info=error)


def log_routing_decision(logger: logging.Logger, from_node: str, decision: str, reason: str = "") -> None:
    """Log routing decision.

    Args:
        logger: Logger instance
        from_node: Source node making the decision
        decision: Routing destination
        reason: Reason for the routing decision
    """
    logger.info(f"Routing decision from {from_node}: → {decision}")
    if reason:
        logger.debug(f"  → Reason: {reason}")


def log_node_entry(logger: logging.Logger, node_name: str, state: Dict[str, Any]) -> None:
    session_id = state.get("session_id") or "N/A"
    logger.debug(f"# ENTERING NODE: {node_name} [{session_id[:8]}]")
    if state.get("note"):
        logger.debug(f"  - note: {state['note'][:200]}")


def log_node_exit(logger: logging.Logger, node_name: str, updates: Dict[str, Any]) -> None:
    """Log node exit with state updates.

    Args:
        logger: Logger instance
        node_name: Name of the node being exited
        updates: State updates returned by the node
    """
    logger.debug(f"# EXITING NODE: {node_name}")
    for key, value in updates.items():
        if key in {"raw_text", "narration"}:
            logger.debug(f"  - {key}: {len(value or '')} chars")
        else:
            logger.debug(f"  - {key}: {value}")


def log_prompt(logger: logging.Logger, phase: str, prompt: str, max_length: int = 500) -> None:
    """Log the prompt sent to the model, truncated for readability."""
    preview = prompt if len(prompt) <= max_length else prompt[:max_length] + "... (truncated)"
    logger.debug(f"Prompt for {phase}:\n{preview}")


def log_event(logger: logging.Logger, event: Dict[str, Any]) -> None:
    logger.debug(f"Event: {json.dumps(event, ensure_ascii=False)[:500]}")
