"""Nox sessions for mpris-block development tasks."""

from __future__ import annotations

import sys

import nox

nox.options.error_on_missing_interpreters = False

PACKAGE = "src/mpris_block"


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks."""
    session.install("ruff")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(name="lint-fix")
def lint_fix(session: nox.Session) -> None:
    """Apply ruff fixes and formatting."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session
def tests(session: nox.Session) -> None:
    """Run pytest without touching the session bus."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", env={"MPRIS_BLOCK_CI": "1"})


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy over the package."""
    session.install("-e", ".", "mypy")
    session.run("mypy", PACKAGE)


@nox.session
def build(session: nox.Session) -> None:
    """Build sdist and wheel artifacts."""
    session.install("build")
    session.run("python", "-m", "build")


@nox.session
def coverage(session: nox.Session) -> None:
    """Run coverage reporting."""
    session.install("-e", ".[dev]", "coverage")
    session.run(
        "coverage",
        "run",
        "--source=mpris_block",
        "-m",
        "pytest",
        env={"MPRIS_BLOCK_CI": "1"},
    )
    session.run("coverage", "report", "--fail-under=80", "-m")


# --------------------------------------------------
#                  LOCAL DEV TESTING
# --------------------------------------------------


@nox.session(name="tests-dev", venv_backend="none")
def tests_dev(session: nox.Session) -> None:
    """Fast local pytest using the active venv; live bus tests included."""
    session.run("python", "-m", "pytest", "-q", external=True)


@nox.session(name="lint-dev", venv_backend="none")
def lint_dev(session: nox.Session) -> None:
    """Fast local lint using the active venv."""
    session.run("python", "-m", "ruff", "check", ".", external=True)
    session.run("python", "-m", "ruff", "format", "--check", ".", external=True)


@nox.session(name="typecheck-dev", venv_backend="none")
def typecheck_dev(session: nox.Session) -> None:
    """Fast local mypy using the active venv."""
    session.run("python", "-m", "mypy", PACKAGE, external=True)


@nox.session(name="local-dev", venv_backend="none")
def local_dev(session: nox.Session) -> None:
    """Run the fast local dev checks (lint, typecheck, tests)."""
    session.run(
        sys.executable,
        "-m",
        "nox",
        "-s",
        "lint-dev",
        "typecheck-dev",
        "tests-dev",
        external=True,
    )
