import pytest

from album_sync.components.search import list_files, list_folders
from album_sync.remote.commands import CommandError
from album_sync.remote.items import RemoteItem
from conftest import FakeSSH


def test_empty_query_skips_the_remote():
    ssh = FakeSSH()
    assert list_folders(ssh, "/srv/albums", "") == []
    assert ssh.commands == []


def test_list_folders_builds_find_grep_pipeline():
    ssh = FakeSSH(responses=[(0, "", "")])
    list_folders(ssh, "/srv/albums", "it's summer")
    assert ssh.commands == [
        "find /srv/albums -type d | grep -i -F -- 'it'\"'\"'s summer'"
    ]


def test_list_folders_parses_output_relative_to_workdir():
    out = "/srv/albums\n/srv/albums/2020/Summer Trip\n/srv/albums/Summer\n\n"
    ssh = FakeSSH(responses=[(0, out, "")])
    items = list_folders(ssh, "/srv/albums/", "summer")
    assert items == [RemoteItem("Summer Trip", "2020"), RemoteItem("Summer")]
    assert [i.path() for i in items] == ["2020/Summer Trip", "Summer"]


def test_no_match_is_an_empty_result():
    ssh = FakeSSH(responses=[(1, "", "")])
    assert list_folders(ssh, "/srv/albums", "winter") == []


def test_stderr_fails_the_search():
    ssh = FakeSSH(responses=[(0, "/srv/albums/x\n", "find: '/srv/albums/private': Permission denied\n")])
    with pytest.raises(CommandError) as exc:
        list_folders(ssh, "/srv/albums", "x")
    assert "Permission denied" in str(exc.value)


def test_list_files_inside_folder():
    out = "/srv/albums/2020/Summer Trip/a.jpg\n/srv/albums/2020/Summer Trip/raw/b.cr2\n"
    ssh = FakeSSH(responses=[(0, out, "")])
    items = list_files(ssh, "/srv/albums", RemoteItem("Summer Trip", "2020"))
    assert ssh.commands == ["find /srv/albums/\"2020\"/\"Summer Trip\" -type f"]
    assert items == [
        RemoteItem("a.jpg", "2020/Summer Trip"),
        RemoteItem("b.cr2", "2020/Summer Trip/raw"),
    ]


def test_list_files_missing_folder_raises():
    ssh = FakeSSH(responses=[(1, "", "find: no such file or directory\n")])
    with pytest.raises(CommandError):
        list_files(ssh, "/srv/albums", RemoteItem("Nope"))
