"""
Test odpwriterctl
"""

import zipfile
from pathlib import Path

import pytest
import yaml

from odpwriter.cli.odpwriterctl import (
    EXIT_OK,
    EXIT_SAVE_FAILED,
    EXIT_USAGE,
    build_parser,
    load_deck,
    main,
)
from odpwriter.models import Image
from odpwriter.registry import PartWriterRegistry
from odpwriter.version import __version__

from conftest import PNG_BYTES


@pytest.fixture
def deck_file(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "images").mkdir()
    (tmp_path / "images" / "logo.png").write_bytes(PNG_BYTES)

    deck = {
        "properties": {"title": "CLI deck"},
        "slides": [
            {"name": "Intro", "shapes": [
                {"type": "text", "paragraphs": ["Hello"], "width": 400, "height": 100},
                {"type": "image", "path": "images/logo.png", "width": 200, "height": 200},
            ]},
            {"name": "Chart", "shapes": [
                {"type": "chart", "title": "Sales", "series": [{"name": "2025", "values": {"Q1": 3}}]},
            ]},
        ],
    }
    path = tmp_path / "deck.yaml"
    path.write_text(yaml.safe_dump(deck))
    return path


class TestLoadDeck:

    def test_relative_paths_resolved(self, deck_file, tmp_path):
        deck = load_deck(deck_file)
        image = deck.slides[0].shapes[1]
        assert isinstance(image, Image)
        assert Path(image.path) == (tmp_path / "images" / "logo.png").resolve()

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ValueError):
            load_deck(path)


class TestCommands:

    def setup_method(self):
        PartWriterRegistry.reset()

    def test_build(self, deck_file, tmp_path):
        out = tmp_path / "out.odp"
        assert main(["build", str(deck_file), "-o", str(out)]) == EXIT_OK

        with zipfile.ZipFile(out) as zf:
            names = zf.namelist()
        assert names[0] == "mimetype"
        assert "Pictures/image1.png" in names
        assert "Object 1/content.xml" in names

    def test_build_with_disk_cache(self, deck_file, tmp_path):
        cache = tmp_path / "cache"
        cache.mkdir()
        plain, cached = tmp_path / "plain.odp", tmp_path / "cached.odp"

        assert main(["build", str(deck_file), "-o", str(plain)]) == EXIT_OK
        assert main(["build", str(deck_file), "-o", str(cached), "--disk-cache", str(cache)]) == EXIT_OK
        assert plain.read_bytes() == cached.read_bytes()

    def test_build_missing_cache_dir(self, deck_file, tmp_path):
        code = main(["build", str(deck_file), "-o", str(tmp_path / "o.odp"),
                     "--disk-cache", str(tmp_path / "nope")])
        assert code == EXIT_USAGE
        assert not (tmp_path / "o.odp").exists()

    def test_build_missing_deck(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["build", "absent.yaml", "-o", "out.odp"]) == EXIT_USAGE

    def test_build_bad_deck(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "bad.yaml").write_text("slides:\n  - shapes:\n      - {type: hologram}\n")
        assert main(["build", "bad.yaml", "-o", "out.odp"]) == EXIT_USAGE
        assert not (tmp_path / "out.odp").exists()

    def test_build_unwritable_output(self, deck_file, tmp_path):
        code = main(["build", str(deck_file), "-o", str(tmp_path / "missing" / "out.odp")])
        assert code == EXIT_SAVE_FAILED

    def test_parts(self, capsys):
        assert main(["parts"]) == EXIT_OK
        lines = capsys.readouterr().out.splitlines()
        assert "mimetype" in lines[0]
        assert "manifest" in lines[-1]

    def test_inspect(self, deck_file, tmp_path, capsys):
        out = tmp_path / "out.odp"
        main(["build", str(deck_file), "-o", str(out)])
        capsys.readouterr()

        assert main(["inspect", str(out)]) == EXIT_OK
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == [str(len("application/vnd.oasis.opendocument.presentation")),
                                    "stored", "mimetype"]

    def test_inspect_not_a_package(self, tmp_path):
        bogus = tmp_path / "bogus.odp"
        bogus.write_text("not a zip")
        assert main(["inspect", str(bogus)]) == EXIT_USAGE

    def test_no_command(self, capsys):
        assert main([]) == EXIT_OK
        assert "odpwriterctl" in capsys.readouterr().out

    def test_output_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["build", "deck.yaml"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == f"odpwriterctl {__version__}"

    def test_empty_properties_in_deck(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "deck.yaml").write_text("properties:\n  title:\n  creator: Ops\nslides: []\n")

        assert main(["build", "deck.yaml", "-o", "out.odp"]) == EXIT_OK
        with zipfile.ZipFile(tmp_path / "out.odp") as zf:
            meta = zf.read("meta.xml").decode("utf-8")
        assert "None" not in meta
        assert "Ops" in meta
