from pathlib import Path

from patchsync.sync.patches import find_patches, format_patch_command, snapshot_patches


def _write(directory: Path, name: str, content: str = "patch\n") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(content)
    return path


class TestFindPatches:
    def test_filename_order(self, tmp_path: Path) -> None:
        _write(tmp_path, "0002-second.patch")
        _write(tmp_path, "0010-tenth.patch")
        _write(tmp_path, "0001-first.patch")
        names = [p.name for p in find_patches(tmp_path)]
        assert names == ["0001-first.patch", "0002-second.patch", "0010-tenth.patch"]

    def test_ignores_other_files(self, tmp_path: Path) -> None:
        _write(tmp_path, "0001-first.patch")
        _write(tmp_path, "README.md")
        (tmp_path / "nested.patch").mkdir()
        assert [p.name for p in find_patches(tmp_path)] == ["0001-first.patch"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert find_patches(tmp_path / "nope") == []


class TestSnapshotPatches:
    def test_copies_keep_names_and_content(self, tmp_path: Path) -> None:
        originals = [_write(tmp_path, "0001-a.patch", "A\n"), _write(tmp_path, "0002-b.patch", "B\n")]
        with snapshot_patches(originals) as copies:
            assert [c.name for c in copies] == ["0001-a.patch", "0002-b.patch"]
            assert [c.read_text() for c in copies] == ["A\n", "B\n"]
            assert copies[0].parent != tmp_path

    def test_isolated_from_later_edits(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "0001-a.patch", "A\n")
        with snapshot_patches([original]) as copies:
            original.write_text("edited\n")
            assert copies[0].read_text() == "A\n"

    def test_directory_removed_on_exit(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "0001-a.patch")
        with snapshot_patches([original]) as copies:
            snapshot_dir = copies[0].parent
        assert not snapshot_dir.exists()

    def test_directory_removed_on_error(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "0001-a.patch")
        snapshot_dir = None
        try:
            with snapshot_patches([original]) as copies:
                snapshot_dir = copies[0].parent
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert snapshot_dir is not None
        assert not snapshot_dir.exists()


def test_format_patch_command() -> None:
    command = format_patch_command(Path("/repo/codee/patches"), "abc123")
    assert command == (
        "rm /repo/codee/patches/* && git format-patch --no-signature --keep-subject "
        "--zero-commit --output-directory /repo/codee/patches abc123..HEAD"
    )


def test_format_patch_command_quotes_spaces() -> None:
    command = format_patch_command(Path("/my repo/patches"), "abc123")
    assert command.startswith("rm '/my repo/patches'/* && ")
