import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run(tmp_path, *args, extra_env=None):
    env = dict(os.environ)
    env["DIRECTORY_CAMPAIGN_NAME"] = "Free Jimmy Kimmel"
    env["DIRECTORY_CONTACTS_PATH"] = str(tmp_path / "contacted.json")
    env.pop("DIRECTORY_DATA_SOURCE", None)
    env.pop("DIRECTORY_FIXTURE_PATH", None)
    env.update(extra_env or {})
    return subprocess.run(
        [sys.executable, "-m", "cdp.run_directory", *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        env=env,
    )


def test_run_directory_demo_smoke(tmp_path):
    r = _run(tmp_path, "--demo")
    assert r.returncode == 0, r.stdout + "\n" + r.stderr
    assert "campaign=Free Jimmy Kimmel" in r.stdout
    assert "markets=Downtown,Midtown,Suburbs" in r.stdout
    assert "shown=5 total=5" in r.stdout
    assert "Disabled Test Company" not in r.stdout


def test_market_flag_limits_view(tmp_path):
    r = _run(tmp_path, "--demo", "--market", "Downtown")
    assert r.returncode == 0, r.stdout + "\n" + r.stderr
    assert "shown=2 total=5" in r.stdout
    assert "Legal Aid Society" not in r.stdout


def test_mark_then_filter_contacted(tmp_path):
    ident = "free-jimmy-kimmel-midtown-legal-aid-society"
    r = _run(tmp_path, "--demo", "--mark", ident, "--contacted", "contacted")
    assert r.returncode == 0, r.stdout + "\n" + r.stderr
    assert f"[x] {ident}" in r.stdout
    assert "shown=1 total=5" in r.stdout

    r = _run(tmp_path, "--demo", "--contacted", "not-contacted")
    assert "shown=4 total=5" in r.stdout


def test_unknown_market_prints_no_matches(tmp_path):
    r = _run(tmp_path, "--demo", "--market", "Nowhere")
    assert r.returncode == 0
    assert "no matches" in r.stdout
    assert "shown=0 total=5" in r.stdout


def test_template_renders_for_record(tmp_path):
    r = _run(tmp_path, "--demo", "--template", "free-jimmy-kimmel-suburbs-food-bank-network")
    assert r.returncode == 0, r.stdout + "\n" + r.stderr
    assert "Partnership Inquiry - Food Bank Network" in r.stdout
    assert "in the Suburbs area" in r.stdout


def test_unknown_campaign_exits_with_error(tmp_path):
    r = _run(tmp_path, "--demo", "--campaign", "No Such Campaign")
    assert r.returncode == 1
    assert 'ERROR err=Campaign "No Such Campaign" not found' in r.stdout


def test_missing_fixture_exits_with_error(tmp_path):
    missing = tmp_path / "nope.yml"
    r = _run(tmp_path, "--demo", extra_env={"DIRECTORY_FIXTURE_PATH": str(missing)})
    assert r.returncode == 1, r.stdout + "\n" + r.stderr
    assert f"ERROR err=fixture not found at: {missing}" in r.stdout
    assert "Traceback" not in r.stderr


def test_unwritable_contact_store_exits_with_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    r = _run(
        tmp_path,
        "--demo",
        "--mark",
        "free-jimmy-kimmel-midtown-legal-aid-society",
        extra_env={"DIRECTORY_CONTACTS_PATH": str(blocker / "contacted.json")},
    )
    assert r.returncode == 1, r.stdout + "\n" + r.stderr
    assert "ERROR err=Failed to update contact status" in r.stdout
