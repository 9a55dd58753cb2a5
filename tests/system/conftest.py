"""Fixtures supporting CLI system tests."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest

RunCli = Callable[
    [Sequence[str] | None, Mapping[str, str] | None, str | None],
    subprocess.CompletedProcess[str],
]

# Stand-in for fzf: answers according to the prompt label (the last argument).
FAKE_FZF = """\
#!/bin/sh
cat > "$WISSHRD_TEST_LOG.$$"
for arg in "$@"; do prompt="$arg"; done
case "$prompt" in
  key*) printf 'al\\nalice\\n' ;;
  account*) printf 'svc-new\\n'; exit 1 ;;
  host*) printf 'fo\\nfoo\\n' ;;
  jump*) printf '\\n'; exit 1 ;;
esac
"""

FAKE_SSH = """\
#!/bin/sh
echo "ssh-called $*"
"""


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the repository root."""

    return Path(__file__).resolve().parents[2]


@pytest.fixture
def fake_bin(tmp_path: Path) -> Path:
    """Directory holding executable stand-ins for fzf and ssh."""

    if sys.platform == "win32":  # pragma: no cover - POSIX shell scripts
        pytest.skip("fake binaries require a POSIX shell")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    for name, body in (("fzf", FAKE_FZF), ("ssh", FAKE_SSH)):
        script = bin_dir / name
        script.write_text(body, encoding="utf-8")
        script.chmod(0o755)
    return bin_dir


@pytest.fixture
def system_environment(
    tmp_path,
    project_root: Path,
) -> tuple[dict[str, str], Path]:
    """Provide an isolated environment for invoking the CLI as a subprocess."""

    config_dir = tmp_path / "config"
    ssh_config = tmp_path / "ssh_config"
    ssh_config.write_text("Host foo bar\nHost *wild*\nUser svc1\nProxyJump jmp1\n", encoding="utf-8")

    env = os.environ.copy()
    env["WISSHRD_CONFIG_DIR"] = str(config_dir)
    env["WISSHRD_SSH_CONFIG"] = str(ssh_config)
    env["WISSHRD_TEST_LOG"] = str(tmp_path / "fzf-input")
    env["LOGNAME"] = "alice"

    existing_path = env.get("PYTHONPATH")
    components = [str(project_root)]
    if existing_path:
        components.append(existing_path)
    env["PYTHONPATH"] = os.pathsep.join(components)

    return env, config_dir


@pytest.fixture
def run_cli(
    system_environment: tuple[dict[str, str], Path],
    project_root: Path,
) -> RunCli:
    """Return a helper that executes the CLI via ``python -m wisshrd``."""

    base_env, _ = system_environment

    def _run(
        args: Sequence[str] | None,
        extra_env: Mapping[str, str] | None = None,
        input_text: str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        command = [sys.executable, "-m", "wisshrd"]
        if args:
            command.extend(args)

        env = base_env.copy()
        if extra_env:
            env.update(extra_env)

        return subprocess.run(
            command,
            cwd=project_root,
            env=env,
            input=input_text,
            text=True,
            capture_output=True,
            check=False,
        )

    return _run


@pytest.fixture
def system_config_dir(system_environment: tuple[dict[str, str], Path]) -> Path:
    """Expose the configuration directory used during system tests."""

    _, config_dir = system_environment
    return config_dir


@pytest.fixture
def path_with_fakes(fake_bin: Path) -> dict[str, str]:
    """Environment overlay that puts the fake binaries first on PATH."""

    return {"PATH": os.pathsep.join([str(fake_bin), os.environ.get("PATH", "")])}
