import json

from cli.main import main


def _build_args(tmp_path, docs_tree, *extra):
    return [
        "build",
        "--docs-dir",
        str(docs_tree),
        "--dist-dir",
        str(tmp_path / "dist"),
        "--base-url",
        "https://example.org/docs",
        *extra,
    ]


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("tweed-docs ")


def test_no_command_prints_help(capsys):
    assert main([]) == 2
    assert "usage:" in capsys.readouterr().out


def test_build_prints_manifest(tmp_path, docs_tree, capsys):
    assert main(_build_args(tmp_path, docs_tree, "--quiet", "--print-manifest")) == 0

    manifest = json.loads(capsys.readouterr().out)
    assert [s["slug"] for s in manifest["sections"]] == ["zeta", "alpha"]
    assert (tmp_path / "dist" / "manifest.json").exists()


def test_build_errors_exit_with_1(tmp_path, capsys):
    assert main(_build_args(tmp_path, tmp_path / "nowhere", "-q")) == 1
    err = capsys.readouterr().err
    assert err.startswith("[tweed-docs] Error:")
    assert "Index file not found" in err


def test_publish_without_push(mocker, tmp_path, docs_tree):
    commit = mocker.patch("cli.main.commit_dist", return_value="Distribution now")
    push = mocker.patch("cli.main.push_dist")

    args = ["publish", "--docs-dir", str(docs_tree), "--dist-dir", str(tmp_path / "dist"), "-q", "--no-push"]
    assert main(args) == 0

    commit.assert_called_once()
    push.assert_not_called()
    assert (tmp_path / "dist" / "manifest.json").exists()


def test_publish_pushes_to_configured_branch(mocker, tmp_path, docs_tree, capsys):
    mocker.patch("cli.main.commit_dist", return_value="Distribution now")
    push = mocker.patch("cli.main.push_dist", return_value="0123456789abcdef")

    args = [
        "publish",
        "--docs-dir",
        str(docs_tree),
        "--dist-dir",
        str(tmp_path / "dist"),
        "-q",
        "--branch",
        "pages",
    ]
    assert main(args) == 0

    cfg = push.call_args.args[0]
    assert cfg.publish_branch == "pages"
    assert "Pushed 0123456789ab to origin/pages" in capsys.readouterr().out


def test_serve_runs_uvicorn(mocker, monkeypatch, tmp_path):
    monkeypatch.setenv("TWEED_DOCS_DIST_DIR", "unset")
    run = mocker.patch("uvicorn.run")

    assert main(["serve", "--dist-dir", str(tmp_path / "dist"), "--port", "9000"]) == 0

    run.assert_called_once_with("preview_server.server:app", host="127.0.0.1", port=9000)


def test_invalid_utf8_document_exits_with_1(tmp_path, docs_tree, capsys):
    (docs_tree / "alpha" / "only.md").write_bytes(b"Just prose \xff\xfe\n")

    assert main(_build_args(tmp_path, docs_tree, "-q")) == 1
    err = capsys.readouterr().err
    assert err.startswith("[tweed-docs] Error:")
    assert "not valid UTF-8" in err
