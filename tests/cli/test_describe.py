import pytest
from click.testing import CliRunner

from versionguard.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.short
def test_parse(runner):
    result = runner.invoke(cli, ["parse", "50.8.47+177"])
    assert result.exit_code == 0
    assert "major: 50" in result.output
    assert "minor: 8" in result.output
    assert "patch: 47" in result.output
    assert "build: 177" in result.output
    assert "base: 50.8.47" in result.output
    assert "canonical: 50.8.47+177" in result.output


@pytest.mark.short
def test_parse_permissive(runner):
    result = runner.invoke(cli, ["parse", "1.x"])
    assert result.exit_code == 0
    assert "canonical: 1.0.0+0" in result.output


@pytest.mark.short
def test_parse_strict(runner):
    result = runner.invoke(cli, ["parse", "--strict", "1.2.3+4"])
    assert result.exit_code == 0
    assert "canonical: 1.2.3+4" in result.output

    result = runner.invoke(cli, ["parse", "--strict", "1.x"])
    assert result.exit_code == 1
    assert "canonical" not in result.output


@pytest.mark.short
def test_next(runner):
    result = runner.invoke(cli, ["next", "50.8.47+177"])
    assert result.exit_code == 0
    assert result.output.strip() == "50.8.48+178"


@pytest.mark.short
def test_next_without_version(runner):
    result = runner.invoke(cli, ["next"])
    assert result.exit_code == 0
    assert result.output.strip() == "1.0.0+1"


@pytest.mark.short
@pytest.mark.parametrize(
    "first, second, expected",
    [
        ("1.0.1+6", "1.0.0+5", "greater"),
        ("1.0.0+5", "1.0.0+5", "equal"),
        ("1.0.3+8", "1.0.5+10", "less"),
        ("1.0.0+2", "1.0.0+1", "greater"),
    ],
)
def test_compare(runner, first, second, expected):
    result = runner.invoke(cli, ["compare", first, second])
    assert result.exit_code == 0
    assert result.output.strip() == expected


@pytest.mark.short
def test_compare_empty(runner):
    result = runner.invoke(cli, ["compare", "", "1.0.0"])
    assert result.exit_code == 1


@pytest.mark.short
def test_version_option(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "versionguard" in result.output
