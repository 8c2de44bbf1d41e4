"""Tests for the first-Admin bootstrap script."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "scripts"))

import bootstrap_admin  # noqa: E402

from fieldops.core.exceptions import Forbidden  # noqa: E402
from tests.conftest import EMPLOYEES_PATH  # noqa: E402

ARGS = ["--email", "Ada@Example.com", "--first-name", "Ada", "--last-name", "Reyes",
        "--designation", "Operations Director", "--password", "hunter22"]


def test_bootstrap_creates_admin(settings, identity, store):
    args = argparse.Namespace(
        email="ada@example.com", first_name="Ada", last_name="Reyes",
        designation="Director", department=None, contact_number=None,
    )
    uid = bootstrap_admin.bootstrap(bootstrap_admin.build_request(args, "hunter22"), settings,
                                    identity=identity, store=store)
    assert identity.get_role_claim(uid) == "Admin"
    assert store.get(EMPLOYEES_PATH, uid)["designation"] == "Director"


def test_second_bootstrap_refused(settings, identity, store):
    args = argparse.Namespace(
        email="ada@example.com", first_name="Ada", last_name="Reyes",
        designation="Director", department=None, contact_number=None,
    )
    request = bootstrap_admin.build_request(args, "hunter22")
    bootstrap_admin.bootstrap(request, settings, identity=identity, store=store)
    with pytest.raises(Forbidden):
        bootstrap_admin.bootstrap({**request, "email": "eve@example.com"}, settings,
                                  identity=identity, store=store)


def test_main_reports_failure(monkeypatch, capsys):
    monkeypatch.setenv("FIELDOPS_APP_ID", "cli-test")
    assert bootstrap_admin.main([*ARGS, "--password", "123"]) == 1
    assert "Password must be at least 6" in capsys.readouterr().err


def test_main_succeeds_with_memory_backends(monkeypatch, capsys):
    monkeypatch.setenv("FIELDOPS_APP_ID", "cli-test")
    assert bootstrap_admin.main(ARGS) == 0
    assert "Created Admin Ada@Example.com" in capsys.readouterr().out
