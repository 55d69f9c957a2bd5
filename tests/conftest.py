"""Shared fixtures for vm_batch tests."""

import pytest

from vm_batch.config import BatchConfig, ProxmoxSettings
from vm_batch.errors import ExternalCallError
from vm_batch.hypervisor import ProxmoxHost

QM_LIST_HEADER = "      VMID NAME                 STATUS     MEM(MB)    BOOTDISK(GB) PID\n"


def qm_list_output(vmids):
    """Build `qm list` output for the given VMIDs."""
    rows = "".join(
        f"      {vmid} vm-{vmid}              stopped    2048              32.00 0\n"
        for vmid in vmids
    )
    return QM_LIST_HEADER + rows


class FakeRunner:
    """Records commands and answers `qm list`; fails commands matching a prefix."""

    def __init__(self, vmids=(), fail_on=None):
        self.vmids = list(vmids)
        self.fail_on = fail_on
        self.commands = []

    def __call__(self, cmd):
        self.commands.append(list(cmd))
        if self.fail_on and cmd[: len(self.fail_on)] == self.fail_on:
            raise ExternalCallError(f"Command failed: {' '.join(cmd)}", command=cmd, stderr="boom")
        if cmd[:2] == ["qm", "list"]:
            return qm_list_output(self.vmids)
        return ""

    def mutating(self):
        """Commands other than the health probe and the inventory listing."""
        return [c for c in self.commands if c[0] == "qm" and c[1] != "list"]


class ScriptedPrompter:
    """Prompter answering from fixed queues."""

    def __init__(self, confirms=(), answers=()):
        self.confirms = list(confirms)
        self.answers = list(answers)
        self.questions = []

    def confirm(self, text, default=False):
        self.questions.append(text)
        return self.confirms.pop(0) if self.confirms else default

    def ask(self, text, default=None):
        self.questions.append(text)
        return self.answers.pop(0) if self.answers else (default or "")


@pytest.fixture
def config():
    return BatchConfig(proxmox=ProxmoxSettings(node="pve1"))


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def host(runner):
    return ProxmoxHost("pve1", runner=runner)
