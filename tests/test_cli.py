import pytest

import album_sync.cli as cli
from album_sync import ui
from album_sync.remote.items import RemoteItem


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def login_args(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return [
        "--host", "nas.local", "--user", "alice", "--password", "pw",
        "--remote-dir", "/srv/albums", "--local-dir", str(tmp_path), "--log-file", "",
    ]


class FakeSession:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None


class FakeTransfer:
    calls = []

    def __init__(self, ssh, settings):
        self.settings = settings

    def download_item(self, item):
        self.calls.append(("download", item))

    def upload_item(self, item):
        self.calls.append(("upload", item))

    def delete_local_item(self, item):
        self.calls.append(("delete", item))


@pytest.fixture
def fake_remote(monkeypatch):
    FakeTransfer.calls = []
    monkeypatch.setattr(cli, "_ssh_for", lambda settings: FakeSession())
    monkeypatch.setattr(cli, "Transfer", FakeTransfer)
    return FakeTransfer.calls


def _answers(monkeypatch, name, values):
    it = iter(values)
    monkeypatch.setattr(ui, name, lambda *a, **k: next(it))


def test_no_arguments_prints_help(capsys):
    assert cli.main([]) == 2
    assert "usage: album-sync" in capsys.readouterr().out


def test_item_from_arg():
    assert cli._item_from_arg("2020/Summer Trip/") == RemoteItem("Summer Trip", "2020")
    assert cli._item_from_arg("Summer") == RemoteItem("Summer")
    with pytest.raises(ValueError):
        cli._item_from_arg("/")


def test_missing_settings_is_a_usage_error(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert cli.main(["search", "summer"]) == 2
    assert "missing required settings" in capsys.readouterr().err


def test_flags_reach_settings(login_args):
    args = cli._build_parser().parse_args(["search", "x", *login_args, "--port", "2222", "--scp-arg=-O"])
    s = cli._settings_from_args(args)
    assert (s.host, s.port, s.username, s.password) == ("nas.local", 2222, "alice", "pw")
    assert s.remote_workdir == "/srv/albums"
    assert s.scp_extra_args == ["-O"]


def test_failure_returns_one(login_args, monkeypatch):
    def boom(args, settings):
        raise RuntimeError("connection refused")

    monkeypatch.setitem(cli.DISPATCH, "search", boom)
    assert cli.main(["search", "summer", *login_args]) == 1


def test_interrupt_returns_130(login_args, monkeypatch):
    def interrupted(args, settings):
        raise KeyboardInterrupt

    monkeypatch.setitem(cli.DISPATCH, "browse", interrupted)
    assert cli.main(["browse", *login_args]) == 130


def test_clean_removes_local_copy(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "Summer").mkdir()
    (tmp_path / "Summer" / "a.jpg").write_bytes(b"x")
    assert cli.main(["clean", "Summer", "--local-dir", str(tmp_path), "--log-file", ""]) == 0
    assert not (tmp_path / "Summer").exists()


def test_download_and_upload_commands(login_args, fake_remote):
    assert cli.main(["download", "2020/Summer", *login_args]) == 0
    assert cli.main(["upload", "2020/Summer", "--clean-local", *login_args]) == 0
    item = RemoteItem("Summer", "2020")
    assert fake_remote == [("download", item), ("upload", item), ("delete", item)]


def test_search_prints_matches(login_args, fake_remote, monkeypatch, capsys):
    monkeypatch.setattr(cli, "list_folders", lambda ssh, root, q: [RemoteItem("Summer Trip", "2020")])
    assert cli.main(["search", "summer", *login_args]) == 0
    assert "2020/Summer Trip" in capsys.readouterr().out


def test_browse_round_trip(login_args, fake_remote, monkeypatch):
    item = RemoteItem("Summer", "2020")
    monkeypatch.setattr(cli, "list_folders", lambda ssh, root, q: [item])
    _answers(monkeypatch, "ask_query", ["summer", ""])
    _answers(monkeypatch, "choose_item", [item])
    # download? yes / done editing? no, then yes
    _answers(monkeypatch, "confirm", [True, False, True])

    assert cli.main(["browse", *login_args]) == 0
    assert fake_remote == [("download", item), ("upload", item)]


def test_browse_declined_download_searches_again(login_args, fake_remote, monkeypatch):
    item = RemoteItem("Summer")
    monkeypatch.setattr(cli, "list_folders", lambda ssh, root, q: [item])
    _answers(monkeypatch, "ask_query", ["summer", "summer", ""])
    _answers(monkeypatch, "choose_item", [None, item])
    _answers(monkeypatch, "confirm", [False])

    assert cli.main(["browse", *login_args]) == 0
    assert fake_remote == []


def test_browse_clean_local(login_args, fake_remote, monkeypatch):
    item = RemoteItem("Summer")
    monkeypatch.setattr(cli, "list_folders", lambda ssh, root, q: [item])
    _answers(monkeypatch, "ask_query", ["summer", ""])
    _answers(monkeypatch, "choose_item", [item])
    _answers(monkeypatch, "confirm", [True, True])

    assert cli.main(["browse", "--clean-local", *login_args]) == 0
    assert fake_remote == [("download", item), ("upload", item), ("delete", item)]


def test_browse_ctrl_d_quits_cleanly(login_args, fake_remote, monkeypatch):
    def eof(*a, **k):
        raise EOFError

    monkeypatch.setattr(ui, "pt_prompt", eof)
    assert cli.main(["browse", *login_args]) == 0
    assert fake_remote == []
