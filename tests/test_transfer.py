import io

from ruamel.yaml import YAML

from snipdeck import dump_snippet_pack, read_snippet_pack

PACK = """\
snippets:
  - command: git stash pop
    keywords: [git, stash]
    description: Re-apply the last stash
  - command: tar -xzf archive.tar.gz
    keywords: tar, extract
  - command: ""
    keywords: [broken]
  - just a string
"""


def upload(client, text, name="pack.yml"):
    return client.post(
        "/api/snippets/import",
        data={"file": (io.BytesIO(text.encode("utf-8")), name)},
        content_type="multipart/form-data",
    )


def test_import_valid_and_skip_invalid(client):
    response = upload(client, PACK)
    assert response.status_code == 201
    assert response.get_json() == {"imported": 2, "skipped": 2}
    snippets = client.get("/api/snippets").get_json()
    assert [s["command"] for s in snippets] == ["git stash pop", "tar -xzf archive.tar.gz"]
    assert snippets[1]["keywords"] == ["tar", "extract"]
    assert snippets[1]["description"] == ""
    assert len({s["id"] for s in snippets}) == 2


def test_import_top_level_list(client):
    response = upload(client, "- command: whoami\n  keywords: [user]\n")
    assert response.get_json() == {"imported": 1, "skipped": 0}


def test_import_appends_to_existing(client):
    client.post("/api/snippets", json={"command": "ls", "keywords": ["ls"]})
    upload(client, "- command: pwd\n  keywords: [dir]\n")
    assert [s["command"] for s in client.get("/api/snippets").get_json()] == ["ls", "pwd"]


def test_import_without_file(client):
    response = client.post("/api/snippets/import", data={}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json() == {"error": "No file selected"}


def test_import_bad_yaml(client):
    response = upload(client, "snippets: [unclosed")
    assert response.status_code == 400
    assert response.get_json()["error"].startswith("Invalid YAML file")


def test_import_without_snippet_list(client):
    response = upload(client, "name: not a pack\n")
    assert response.status_code == 400
    assert response.get_json() == {"error": "No snippets found in file"}


def test_export_download(client):
    client.post("/api/snippets", json={"command": "git status", "keywords": ["git"], "description": "Status"})
    response = client.get("/api/snippets/export", query_string={"filename": "my pack"})
    assert response.status_code == 200
    assert "my_pack.yml" in response.headers["Content-Disposition"]
    data = YAML(typ="safe").load(response.get_data(as_text=True))
    assert data["snippets"][0]["command"] == "git status"
    assert data["snippets"][0]["keywords"] == ["git"]


def test_export_default_filename(client):
    response = client.get("/api/snippets/export")
    assert "snippets.yml" in response.headers["Content-Disposition"]
    assert YAML(typ="safe").load(response.get_data(as_text=True)) == {"snippets": []}


def test_export_then_import_into_fresh_collection(client, data_dir):
    client.post("/api/snippets", json={"command": "echo $HOME", "keywords": ["env"]})
    exported = client.get("/api/snippets/export").get_data(as_text=True)
    (data_dir / "snippets.json").unlink()
    assert upload(client, exported).get_json() == {"imported": 1, "skipped": 0}
    assert client.get("/api/snippets").get_json()[0]["command"] == "echo $HOME"


def test_pack_helpers():
    text = dump_snippet_pack([{"id": "1", "command": "ls", "keywords": ["ls"], "description": ""}])
    entries = read_snippet_pack(text)
    assert entries[0]["command"] == "ls"
    assert list(entries[0]["keywords"]) == ["ls"]
