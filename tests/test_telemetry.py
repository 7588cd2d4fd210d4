import io

import pytest

from fnkrt.telemetry import Telemetry


def _telemetry(level=3):
    stream = io.StringIO()
    return Telemetry(stream, level), stream


def test_puts_appends_newline():
    tel, stream = _telemetry()
    count = tel.puts("abc")
    assert stream.getvalue() == "abc\n"
    assert count == len("abc\n")


def test_putc_writes_one_character():
    tel, stream = _telemetry()
    assert tel.putc("x") == 1
    assert stream.getvalue() == "x"


def test_putc_rejects_longer_text():
    tel, _ = _telemetry()
    with pytest.raises(ValueError):
        tel.putc("xy")


def test_printf_formats():
    tel, stream = _telemetry()
    count = tel.printf("%s:%d\n", "value", 5)
    assert stream.getvalue() == "value:5\n"
    assert count == len(stream.getvalue())


def test_error_tag_names_caller_file():
    tel, stream = _telemetry()
    tel.error("Hanging due to error..\n")
    text = stream.getvalue()
    assert text.startswith("[ERR test_telemetry.py:")
    assert text.endswith("]Hanging due to error..\n")


def test_info_and_warn_tags():
    tel, stream = _telemetry()
    tel.info("a\n")
    tel.warn("b %d\n", 2)
    lines = stream.getvalue().splitlines()
    assert lines[0].startswith("[INF test_telemetry.py:")
    assert lines[0].endswith("]a")
    assert lines[1].startswith("[WRN test_telemetry.py:")
    assert lines[1].endswith("]b 2")


def test_tag_carries_caller_line():
    tel, stream = _telemetry()
    tel.error("x")
    first = stream.getvalue()
    tel.error("x")
    second = stream.getvalue()[len(first):]
    line_a = int(first.split(":")[1].split("]")[0])
    line_b = int(second.split(":")[1].split("]")[0])
    assert line_b == line_a + 2


def test_verbose_level_one_only_shows_errors():
    tel, stream = _telemetry(level=1)
    assert tel.info("i\n") == 0
    assert tel.warn("w\n") == 0
    assert tel.error("e\n") > 0
    assert stream.getvalue().startswith("[ERR ")
    assert "i\n" not in stream.getvalue().replace("e\n", "")


def test_verbose_level_two_hides_info():
    tel, stream = _telemetry(level=2)
    tel.info("i")
    tel.warn("w")
    assert stream.getvalue().startswith("[WRN ")
    assert "[INF" not in stream.getvalue()


def test_default_stream_is_stdout(capsys):
    tel = Telemetry()
    tel.init()
    tel.puts("boot")
    tel.fini()
    assert capsys.readouterr().out == "boot\n"