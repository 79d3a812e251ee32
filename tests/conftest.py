"""
Shared test fixtures: a scripted command runner standing in for the shell.
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import pytest

from autopilot_onboard.core.command_runner import CommandRunner, CommandResult
from config.settings import Settings

TOOL = "iam-policy-autopilot"
TOOL_VERSION_OUTPUT = "iam-policy-autopilot: 0.1.2\n"
AWS_VERSION_OUTPUT = "aws-cli/2.15.30 Python/3.11.8 Linux/6.5.0 exe/x86_64.ubuntu.22\n"

CONFIGURE_LIST_FULL = """\
      Name                    Value             Type    Location
      ----                    -----             ----    --------
   profile                <not set>             None    None
access_key     ****************ABCD shared-credentials-file
secret_key     ****************WXYZ shared-credentials-file
    region                us-east-1      config-file    ~/.aws/config
"""

CONFIGURE_LIST_NO_SECRET = """\
      Name                    Value             Type    Location
      ----                    -----             ----    --------
   profile                <not set>             None    None
access_key     ****************ABCD shared-credentials-file
secret_key                <not set>             None    None
    region                us-east-1      config-file    ~/.aws/config
"""

CONFIGURE_LIST_EMPTY = """\
      Name                    Value             Type    Location
      ----                    -----             ----    --------
   profile                <not set>             None    None
access_key                <not set>             None    None
secret_key                <not set>             None    None
    region                <not set>             None    None
"""

Response = Union[CommandResult, Callable[[List[str]], CommandResult]]


def ok(stdout: str = "", stderr: str = "") -> CommandResult:
    return CommandResult(args=[], returncode=0, stdout=stdout, stderr=stderr)


def fail(returncode: int = 1, stderr: str = "error") -> CommandResult:
    return CommandResult(args=[], returncode=returncode, stderr=stderr,
                         error=f"Exited with code {returncode}")


class FakeRunner(CommandRunner):
    """Scripted stand-in for the shell.

    `executables` is what PATH resolves. Responses are looked up by the
    longest registered argv prefix. Every run() call is recorded.
    """

    def __init__(self, executables: Iterable[str] = ()):
        super().__init__()
        self.executables = set(executables)
        self.responses: Dict[Tuple[str, ...], Response] = {}
        self.calls: List[List[str]] = []
        self.on([TOOL, "--version"], ok(TOOL_VERSION_OUTPUT))

    def on(self, prefix: List[str], response: Response) -> "FakeRunner":
        self.responses[tuple(prefix)] = response
        return self

    def installer(self, places_binary: bool = True) -> Callable[[List[str]], CommandResult]:
        """A handler that exits 0 and optionally puts the tool on PATH."""
        def handler(args):
            if places_binary:
                self.executables.add(TOOL)
            return ok("installed")
        return handler

    def command_exists(self, name: str) -> bool:
        return name in self.executables

    def elevate(self, args: List[str]) -> List[str]:
        return ["sudo", "-n"] + list(args)

    def run(self, args: List[str], timeout: Optional[float] = None) -> CommandResult:
        self.calls.append(list(args))
        if args[0] not in self.executables:
            return CommandResult(args=list(args), not_found=True,
                                 error=f"{args[0]}: command not found")
        for length in range(len(args), 0, -1):
            response = self.responses.get(tuple(args[:length]))
            if response is None:
                continue
            result = response(list(args)) if callable(response) else response
            result.args = list(args)
            return result
        return fail(stderr=f"unscripted command: {' '.join(args)}")

    def ran(self, program: str) -> List[List[str]]:
        """Calls whose argv (after any sudo prefix) starts with `program`."""
        return [call for call in self.calls if _strip_sudo(call)[:1] == [program]]

    @property
    def install_calls(self) -> List[List[str]]:
        return [call for call in self.calls if "--version" not in call
                and call[1:3] not in (["configure", "list"], ["sts", "get-caller-identity"])]


def _strip_sudo(args: List[str]) -> List[str]:
    if args[:2] == ["sudo", "-n"]:
        return args[2:]
    return args


@pytest.fixture
def settings() -> Settings:
    return Settings(logging={"file_path": None})


@pytest.fixture
def make_runner():
    """Build a FakeRunner for a described environment."""
    def factory(tool: bool = False,
                uvx: bool = False,
                aws: bool = True,
                configure_list: str = CONFIGURE_LIST_FULL,
                extra: Iterable[str] = ()) -> FakeRunner:
        executables = set(extra)
        if tool:
            executables.add(TOOL)
        if uvx:
            executables.add("uvx")
        if aws:
            executables.add("aws")
        runner = FakeRunner(executables)
        runner.on(["uvx", TOOL, "--version"], ok(TOOL_VERSION_OUTPUT))
        runner.on(["aws", "--version"], ok(AWS_VERSION_OUTPUT))
        runner.on(["aws", "configure", "list"], ok(configure_list))
        return runner
    return factory
