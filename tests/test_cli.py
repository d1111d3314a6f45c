import httpx
import pytest
from typer.testing import CliRunner

from confmod.cli.main import app
from confmod.moderation import pipeline as pipeline_module
from confmod.moderation.http import build_client


runner = CliRunner()


@pytest.fixture
def cli_backend(backend, monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://testserver/api")
    monkeypatch.setattr(
        pipeline_module,
        "build_client",
        lambda settings, transport=None: build_client(
            settings, transport=httpx.MockTransport(backend.handler)
        ),
    )
    backend.add_request("req1", "recA", summary_title="Alpha")
    backend.add_request("req2", "recB")
    backend.set_details(
        "recA",
        "Alpha",
        acronym="ALP",
        organizations=[
            {
                "fromDate": "2025-05-21",
                "toDate": "2025-05-31",
                "locations": [{"cityStateProvince": "Da Nang", "country": "Vietnam"}],
                "topics": ["AI"],
            }
        ],
    )
    backend.details["recB"] = 500
    return backend


def test_list_prints_records_and_counts(cli_backend):
    result = runner.invoke(app, ["requests", "list"])

    assert result.exit_code == 0, result.output
    assert "Alpha (ALP)" in result.output
    assert "May 21, 2025 - May 31, 2025" in result.output
    assert "Da Nang, Vietnam" in result.output
    assert "details unavailable: HTTP 500" in result.output
    assert "shown=2 all=2 pending=2 approved=0 rejected=0" in result.output


def test_list_search_and_title_sort(cli_backend):
    result = runner.invoke(app, ["requests", "list", "--search", "ALP", "--sort", "title"])

    assert result.exit_code == 0, result.output
    assert "Alpha" in result.output
    assert "Untitled Conference" not in result.output
    assert "sortBy" not in cli_backend.list_calls()[0].url.params


def test_list_rejects_bad_date(cli_backend):
    result = runner.invoke(app, ["requests", "list", "--since", "21/05/2025"])
    assert result.exit_code != 0
    assert cli_backend.calls == []


def test_list_reports_list_failure(cli_backend):
    cli_backend.list_status = 500
    result = runner.invoke(app, ["requests", "list"])
    assert result.exit_code == 1
    assert "HTTP 500" in result.output


def test_set_status_requires_comment_for_reject(cli_backend):
    result = runner.invoke(app, ["requests", "set-status", "req1", "rejected"])

    assert result.exit_code == 1
    assert "comment is required" in result.output
    assert cli_backend.updates == []


def test_set_status_submits_update(cli_backend):
    result = runner.invoke(
        app, ["requests", "set-status", "req1", "REJECTED", "--message", " duplicate "]
    )

    assert result.exit_code == 0, result.output
    assert cli_backend.updates == [("req1", {"status": "REJECTED", "message": "duplicate"})]
