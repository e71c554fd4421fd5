"""Intent policy applied to parsed responses.

``ACTION_COMMANDS`` is a policy table, not mechanism: it maps the
assistant's declared ``action`` to a conservative first command used when
the model says it wants to run something but forgot to propose it.
"""

from __future__ import annotations

from typing import Dict

from .schema import AssistantResponse, CommandProposal


def _canned(command: str, rationale: str) -> CommandProposal:
    return CommandProposal(command=command, rationale=rationale, risk="low", requires_approval=True)


ACTION_COMMANDS: Dict[str, CommandProposal] = {
    "inspect_services": _canned(
        "systemctl list-units --type=service --state=running --no-pager",
        "Lists running systemd services to see what is active.",
    ),
    "inspect_ports": _canned("ss -tulpn", "Shows listening sockets and their owning processes."),
    "inspect_disk": _canned("df -h", "Shows filesystem usage in human-readable units."),
    "inspect_memory": _canned("free -h", "Shows memory and swap usage."),
    "inspect_cpu": _canned("uptime", "Shows load averages and uptime at a glance."),
    "inspect_updates": _canned(
        "apt list --upgradable 2>/dev/null",
        "Lists pending updates without installing anything.",
    ),
    "inspect_logs": _canned("journalctl -n 200 --no-pager", "Shows recent system logs for context."),
    "inspect_processes": _canned("ps aux --sort=-%cpu | head -n 15", "Shows top CPU-consuming processes."),
    "fix_issue": _canned("systemctl --failed --no-pager", "Shows failed services as a first diagnostic step."),
    "deploy": _canned("pwd", "Confirms current directory before taking deployment steps."),
    "configure": _canned("whoami && hostname", "Confirms current user/host before configuration changes."),
    "security": _canned("ss -tulpn", "Reviews listening services as a first security check."),
    "network": _canned("ip addr show", "Shows network interfaces and addresses."),
    "unknown": _canned("whoami && hostname", "Establishes basic context before proceeding."),
}


def enforce_intent_policy(response: AssistantResponse) -> AssistantResponse:
    """Keep commands only where the declared intent allows them.

    - ``done`` responses never carry commands.
    - ``command`` intent with no commands falls back to the canned command
      for the declared action, when there is one.
    - Any other intent (including a missing one) drops the commands.
    """
    if response.done:
        return response.model_copy(update={"commands": []})

    if response.intent == "command":
        if response.commands:
            return response
        canned = ACTION_COMMANDS.get(response.action or "")
        if canned is not None:
            return response.model_copy(update={"commands": [canned.model_copy()]})
        return response

    return response.model_copy(update={"commands": []})
