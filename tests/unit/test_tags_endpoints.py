from fastapi.testclient import TestClient

from tags_api.app.config.settings import Settings
from tests.conftest import FakeTagSource, failing_source
from tests.test_data import EXIF_MAKE_BODY, EXIF_MAKE_XML, MALFORMED_AFTER_TWO_XML, MULTI_TABLE_PATHS


def test_get_tags_streams_every_tag(test_app):
    client = TestClient(test_app)
    r = client.get("/tags")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert [t["path"] for t in r.json()["tags"]] == MULTI_TABLE_PATHS


def test_get_tags_example_body(test_app):
    test_app.state.tag_source = FakeTagSource(EXIF_MAKE_XML)
    client = TestClient(test_app)
    r = client.get("/tags", params={"table": "EXIF"})
    assert r.status_code == 200
    assert r.text == EXIF_MAKE_BODY


def test_get_tags_filters_by_table_and_tag(test_app):
    client = TestClient(test_app)
    r = client.get("/tags", params={"table": "EXIF", "tag": "Model"})
    assert r.status_code == 200
    assert [t["path"] for t in r.json()["tags"]] == ["EXIF:Model"]


def test_get_tags_empty_params_match_everything(test_app):
    client = TestClient(test_app)
    r = client.get("/tags", params={"table": "", "tag": ""})
    assert len(r.json()["tags"]) == len(MULTI_TABLE_PATHS)


def test_get_tags_terminates_process(test_app):
    source = FakeTagSource()
    test_app.state.tag_source = source
    client = TestClient(test_app)
    client.get("/tags", params={"table": "EXIF"})
    assert len(source.processes) == 1
    assert source.processes[0].terminated


def test_get_tags_500_when_source_fails_to_start(test_app):
    test_app.state.tag_source = failing_source("failed to start exiftool: no such file")
    client = TestClient(test_app)
    r = client.get("/tags")
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text == "failed to start exiftool: no such file"


def test_get_tags_500_when_source_missing(test_app):
    test_app.state.tag_source = None
    client = TestClient(test_app)
    r = client.get("/tags")
    assert r.status_code == 500


def test_get_tags_parse_failure_truncates_body(test_app):
    source = FakeTagSource(MALFORMED_AFTER_TWO_XML)
    test_app.state.tag_source = source
    client = TestClient(test_app)
    r = client.get("/tags")
    assert r.status_code == 200
    assert r.text.startswith('{"tags": [{"writable":true,"path":"A:One"')
    assert not r.text.endswith("]}")
    assert r.text.count('"path"') == 2
    assert source.processes[0].terminated


def test_get_tags_table_optional_by_default(test_app):
    client = TestClient(test_app)
    r = client.get("/tags", params={"tag": "Make"})
    assert r.status_code == 200
    assert [t["path"] for t in r.json()["tags"]] == ["EXIF:Make", "exif:Make"]


def test_get_tags_400_when_table_required_and_missing(test_app):
    test_app.state.settings = Settings(_env_file=None, REQUIRE_TABLE=True)
    source = FakeTagSource()
    test_app.state.tag_source = source
    client = TestClient(test_app)
    r = client.get("/tags", params={"tag": "Make"})
    assert r.status_code == 400
    assert r.text == "table name required"
    assert source.processes == []

    r = client.get("/tags", params={"table": "EXIF", "tag": "Make"})
    assert r.status_code == 200
