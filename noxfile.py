"""Installs ptp-log-splitter and prints help text with Python 3.10 - 3.13, and runs the tests

Use this file with the `nox` tool to run ptp-log-splitter with all specified versions
of Python. For more information, see: https://nox.thea.codes/en/stable/
"""
import nox

@nox.session(python=["3.10", "3.11", "3.12", "3.13"])
def smoke_test(session):
    session.install(".")
    session.run("ptp-log-splitter", "-h")


@nox.session(python=["3.10", "3.11", "3.12", "3.13"])
def tests(session):
    session.install(".[test]")
    session.run("pytest", "tests")
