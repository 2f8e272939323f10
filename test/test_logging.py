import pytest

from tabula.core.logging import Logger, color_palette


def test_indented_nests_and_restores():
    logger = Logger()

    with logger.indented():
        assert logger.indent == 1
        with logger.indented(2):
            assert logger.indent == 3
    assert logger.indent == 0


def test_indented_restores_after_error():
    logger = Logger()

    with pytest.raises(RuntimeError):
        with logger.indented():
            raise RuntimeError("boom")
    assert logger.indent == 0


def test_indented_messages_are_prefixed(capsys):
    logger = Logger()

    logger.info("outer")
    with logger.indented():
        logger.info("inner")

    lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
    assert lines[0].startswith("i outer")
    assert lines[1].startswith("  i inner")


def test_level_filters_messages(capsys):
    logger = Logger("WARNING")

    logger.info("hidden")
    logger.warn("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err


def test_palette_escapes_markup():
    assert color_palette["table"]("[bold]x") == "[cyan]\\[bold]x[/cyan]"
