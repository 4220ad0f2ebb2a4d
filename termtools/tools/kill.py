"""Process killer: browse ``ps`` output and send SIGTERM after confirmation."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ..config import DEFAULT_PROCESS_TIMEOUT_SECONDS
from ..entry import Entry
from ..preview.model import Preview, text_preview
from ..process import STATUS_FAILED, run_command
from ..session.state import ActionResult, Suspend, Tool

PS_FIELDS = 11


@dataclass(frozen=True)
class ProcessInfo:
    pid: int
    name: str
    cpu: float
    memory: float
    command: str


def parse_ps_line(line: str) -> ProcessInfo | None:
    """Parse one ``ps aux`` row; the command is every field from the eleventh on."""
    parts = line.split()
    if len(parts) < PS_FIELDS:
        return None
    try:
        pid = int(parts[1])
        cpu = float(parts[2])
        memory = float(parts[3])
    except ValueError:
        return None
    command = " ".join(parts[PS_FIELDS - 1:])
    name = os.path.basename(command.split()[0]) or command
    return ProcessInfo(pid=pid, name=name, cpu=cpu, memory=memory, command=command)


def parse_ps_output(output: str) -> list[ProcessInfo]:
    """User processes sorted by CPU usage, highest first.

    Kernel threads (bracketed names) and pid 0/1 are left out.
    """
    processes = []
    for line in output.splitlines():
        proc = parse_ps_line(line)
        if proc is None or proc.command.startswith("[") or proc.pid <= 1:
            continue
        processes.append(proc)
    processes.sort(key=lambda proc: proc.cpu, reverse=True)
    return processes


def process_entry(proc: ProcessInfo) -> Entry[ProcessInfo]:
    label = f"{proc.pid:>8} {proc.cpu:>6.1f}% {proc.memory:>6.1f}% {proc.name}"
    return Entry(label=label, payload=proc, search_fields=(proc.name, proc.command, str(proc.pid)), key=proc.pid)


class KillTool(Tool):
    name = "kill"
    title = "Processes"
    help_text = "↑/↓ Navigate • Enter Kill • Esc Quit"

    def __init__(self, *, timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS, runner=run_command) -> None:
        self.timeout = timeout
        self.runner = runner

    def load_entries(self) -> list[Entry[ProcessInfo]]:
        output = self.runner("ps", ["aux", "--no-headers"], timeout=self.timeout).check()
        return [process_entry(proc) for proc in parse_ps_output(output)]

    def load_message(self, entries: list[Entry]) -> str:
        return f"Found {len(entries)} processes"

    def preview(self, entry: Entry[ProcessInfo]) -> Preview:
        proc = entry.payload
        return text_preview(
            "\n".join(
                [
                    f"Name: {proc.name}",
                    f"PID: {proc.pid}",
                    f"CPU: {proc.cpu:.1f}%",
                    f"Memory: {proc.memory:.1f}%",
                    "",
                    f"Command: {proc.command}",
                ]
            )
        )

    def activate(self, entry: Entry[ProcessInfo], suspend: Suspend) -> ActionResult:
        proc = entry.payload
        return ActionResult(confirm=f"Kill process {proc.name} (PID {proc.pid})? [y/N]")

    def confirm(self, entry: Entry[ProcessInfo], suspend: Suspend) -> ActionResult:
        pid = entry.payload.pid
        result = self.runner("kill", [str(pid)], timeout=self.timeout)
        if result.ok:
            return ActionResult(message=f"Process {pid} killed successfully", reload=True)
        if result.status == STATUS_FAILED:
            return ActionResult(message=f"Failed to kill process {pid}: {result.stderr.strip()}")
        return ActionResult(message=f"Error killing process {pid}: {result.error}")
