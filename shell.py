"""Shell integration: the wrapper function and the post-exit ``cd`` script."""

from __future__ import annotations

import logging
import shlex
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

BINARY_NAME = "rgm-bin"

WRAPPER_TEMPLATE = """
# Welcome to RGM!

function rgm(){{
    {binary} "$@"
    source {shell_file}
}}

# To init rgm, add the following line to your {rc_file}:
#
# eval "$({binary} init {shell})"
"""


class ShellType(str, Enum):
    zsh = "zsh"
    bash = "bash"


RC_FILES = {
    ShellType.zsh: "$HOME/.zshrc",
    ShellType.bash: "$HOME/.bashrc",
}


def wrapper_source(shell: ShellType, shell_file: Path) -> str:
    """Shell function that runs rgm and then sources the cd script it leaves behind."""
    return WRAPPER_TEMPLATE.format(
        binary=BINARY_NAME,
        shell_file=shlex.quote(str(shell_file)),
        rc_file=RC_FILES[shell],
        shell=shell.value,
    )


def clear_shell_file(shell_file: Path) -> None:
    shell_file.parent.mkdir(parents=True, exist_ok=True)
    shell_file.write_text("", encoding="utf-8")


def write_cd_script(shell_file: Path, target: Path) -> None:
    shell_file.parent.mkdir(parents=True, exist_ok=True)
    shell_file.write_text(f"#!/bin/sh\ncd {shlex.quote(str(target))}\n", encoding="utf-8")
    logger.info("Wrote cd script for %s", target)
