"""
Tests for repository tree construction
"""

from src.services.tree_builder import (
    build_nested_tree,
    github_entries_to_files,
    github_entries_to_paths,
    walk_directory,
)
from tests.helpers import sample_entries


class TestBuildNestedTree:

    def test_nests_flat_paths(self):
        tree = build_nested_tree(["src/app.js", "src/lib/util.ts", "README.md"])

        assert [n["name"] for n in tree] == ["src", "README.md"]
        src = tree[0]
        assert src["type"] == "folder"
        assert src["path"] == "src"
        assert src["technologies"] == []
        assert [n["name"] for n in src["children"]] == ["lib", "app.js"]
        util = src["children"][0]["children"][0]
        assert util == {
            "name": "util.ts",
            "type": "file",
            "path": "src/lib/util.ts",
            "technologies": ["TypeScript"],
            "badge": {"label": "TS", "color": "blue"},
        }

    def test_folders_first_then_case_insensitive_names(self):
        tree = build_nested_tree(["b.txt", "A.txt", "zeta/x.js", "Alpha/y.js", "c.txt"])
        assert [n["name"] for n in tree] == ["Alpha", "zeta", "A.txt", "b.txt", "c.txt"]

    def test_files_carry_technologies(self):
        tree = build_nested_tree(["README.md"])
        assert tree[0]["technologies"] == ["Markdown", "Documentation"]
        assert "children" not in tree[0]

    def test_annotate_can_be_disabled(self):
        tree = build_nested_tree(["a.py"], annotate=None)
        assert tree[0]["technologies"] == []

    def test_empty_input(self):
        assert build_nested_tree([]) == []

    def test_duplicate_and_slash_padded_paths(self):
        tree = build_nested_tree(["/docs/guide.md", "docs/guide.md/"])
        assert len(tree) == 1
        assert [c["path"] for c in tree[0]["children"]] == ["docs/guide.md"]


class TestGitHubEntries:

    def test_paths_keep_blobs_only(self):
        paths = github_entries_to_paths(sample_entries())
        assert "src" not in paths
        assert "src/components" not in paths
        assert paths[0] == "README.md"
        assert len(paths) == 5

    def test_files_are_annotated(self):
        files = github_entries_to_files(sample_entries())
        login = next(f for f in files if f["path"] == "src/components/LoginButton.jsx")
        assert login == {
            "name": "LoginButton.jsx",
            "type": "file",
            "path": "src/components/LoginButton.jsx",
            "technologies": ["React"],
            "badge": {"label": "React", "color": "blue"},
            "size": 800,
            "sha": "a3",
        }
        assert all(f["type"] == "file" for f in files)


class TestWalkDirectory:

    def test_skips_ignored_dirs(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "index.js").write_text("console.log(1)")
        (tmp_path / "README.md").write_text("# hi")
        for ignored in ("node_modules", ".git", "dist"):
            (tmp_path / ignored).mkdir()
            (tmp_path / ignored / "junk.js").write_text("x")

        assert walk_directory(tmp_path) == ["README.md", "src/index.js"]

    def test_custom_ignore_set(self, tmp_path):
        (tmp_path / "dist").mkdir()
        (tmp_path / "dist" / "out.js").write_text("x")
        assert walk_directory(tmp_path, ignore_dirs=set()) == ["dist/out.js"]


def test_folders_have_no_badge():
    tree = build_nested_tree(["Dockerfile", "docs/notes.md"])

    assert "badge" not in tree[0]
    assert tree[1]["badge"] == {"label": "Docker", "color": "blue"}
