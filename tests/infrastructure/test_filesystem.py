"""Tests for confined path resolution and MIME guessing."""

from pathlib import Path

import pytest

from melange.infrastructure.filesystem import (
    PathForbiddenError,
    guess_mime_type,
    is_under_base,
    read_file_bytes,
    resolve_confined_path,
)


@pytest.fixture
def base(tmp_path: Path) -> Path:
    root = tmp_path / "cfg"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_text("<html></html>")
    (root / "assets" / "style.css").write_text("body {}")
    return root


class TestIsUnderBase:
    def test_prefix_match(self, base: Path) -> None:
        assert is_under_base(f"{base}/index.html", base)

    def test_command_token(self, base: Path) -> None:
        assert not is_under_base("open-terminal", base)

    def test_textual_only(self, base: Path) -> None:
        """Classification is textual; containment is checked later."""
        assert is_under_base(f"{base}/../../etc/passwd", base)


class TestResolveConfinedPath:
    def test_file_inside(self, base: Path) -> None:
        assert resolve_confined_path(base, f"{base}/index.html") == base.resolve() / "index.html"

    def test_nested_file(self, base: Path) -> None:
        path = resolve_confined_path(base, f"{base}/assets/style.css")
        assert path == base.resolve() / "assets" / "style.css"

    def test_dotdot_inside_is_allowed(self, base: Path) -> None:
        path = resolve_confined_path(base, f"{base}/assets/../index.html")
        assert path == base.resolve() / "index.html"

    def test_base_itself(self, base: Path) -> None:
        assert resolve_confined_path(base, str(base)) == base.resolve()

    def test_missing_file_inside_is_allowed(self, base: Path) -> None:
        path = resolve_confined_path(base, f"{base}/nope.html")
        assert path == base.resolve() / "nope.html"

    @pytest.mark.parametrize(
        "suffix",
        ["/../../etc/passwd", "/assets/../../outside.txt", "/../cfg-sibling/secret"],
    )
    def test_traversal_forbidden(self, base: Path, suffix: str) -> None:
        with pytest.raises(PathForbiddenError) as exc_info:
            resolve_confined_path(base, f"{base}{suffix}")
        assert not exc_info.value.resolved.is_relative_to(base.resolve())

    def test_sibling_prefix_forbidden(self, base: Path) -> None:
        """``/x/cfg-evil`` starts with ``/x/cfg`` textually but is not inside it."""
        evil = base.parent / "cfg-evil"
        evil.mkdir()
        (evil / "loot").write_text("x")
        with pytest.raises(PathForbiddenError):
            resolve_confined_path(base, f"{evil}/loot")

    def test_symlink_escape_forbidden(self, base: Path, tmp_path: Path) -> None:
        secret = tmp_path / "secret.txt"
        secret.write_text("top secret")
        (base / "link.txt").symlink_to(secret)
        with pytest.raises(PathForbiddenError):
            resolve_confined_path(base, f"{base}/link.txt")

    def test_symlink_within_base(self, base: Path) -> None:
        (base / "home.html").symlink_to(base / "index.html")
        assert resolve_confined_path(base, f"{base}/home.html") == base.resolve() / "index.html"

    def test_symlinked_base(self, base: Path, tmp_path: Path) -> None:
        alias = tmp_path / "alias"
        alias.symlink_to(base)
        path = resolve_confined_path(alias, f"{alias}/index.html")
        assert path == base.resolve() / "index.html"

    def test_percent_encoded(self, base: Path) -> None:
        (base / "my page.html").write_text("")
        path = resolve_confined_path(base, f"{base}/my%20page.html")
        assert path.name == "my page.html"

    def test_percent_encoded_traversal(self, base: Path) -> None:
        with pytest.raises(PathForbiddenError):
            resolve_confined_path(base, f"{base}/%2E%2E/%2E%2E/etc/passwd")


class TestGuessMimeType:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("index.html", "text/html"),
            ("style.css", "text/css"),
            ("logo.png", "image/png"),
            ("data.json", "application/json"),
        ],
    )
    def test_known(self, name: str, expected: str) -> None:
        assert guess_mime_type(Path(name)) == expected

    def test_unknown_extension(self) -> None:
        assert guess_mime_type(Path("file.zzunknown")) == ""

    def test_no_extension(self) -> None:
        assert guess_mime_type(Path("README")) == ""


class TestReadFileBytes:
    def test_reads_exact_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "blob.bin"
        payload = bytes(range(256))
        path.write_bytes(payload)
        assert read_file_bytes(path) == payload

    def test_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_file_bytes(tmp_path / "missing")
