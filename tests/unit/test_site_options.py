from __future__ import annotations

import pytest

from mdsite.model.site_options import PathCase, SiteOptions


def test_defaults() -> None:
    options = SiteOptions()
    assert options.index == "README.md"
    assert options.extension == ".md"
    assert options.output_extension == ".html"
    assert options.path_case is PathCase.SENSITIVE
    assert options.workers == 1


def test_from_cli_maps_values() -> None:
    options = SiteOptions.from_cli(index="./docs/index.md", path_case="insensitive", workers=4)
    assert options.index == "docs/index.md"
    assert options.path_case is PathCase.INSENSITIVE
    assert options.workers == 4


def test_from_cli_rejects_invalid_path_case() -> None:
    with pytest.raises(ValueError, match="Invalid path case 'lower'"):
        SiteOptions.from_cli(path_case="lower")


def test_from_cli_rejects_invalid_workers() -> None:
    with pytest.raises(ValueError, match="Invalid workers"):
        SiteOptions.from_cli(workers=0)


@pytest.mark.parametrize("index", ["", "docs/", "..", "../README.md"])
def test_from_cli_rejects_invalid_index(index: str) -> None:
    with pytest.raises(ValueError, match="Invalid index"):
        SiteOptions.from_cli(index=index)


def test_to_dict_and_repr() -> None:
    options = SiteOptions(path_case=PathCase.INSENSITIVE, workers=2)
    assert options.to_dict() == {
        "index": "README.md",
        "extension": ".md",
        "output_extension": ".html",
        "path_case": "insensitive",
        "workers": 2,
    }
    assert "path_case=insensitive" in repr(options)
