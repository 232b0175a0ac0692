import io

import pytest

import huffman as huff
import session


def _reader(lines):
    it = iter(lines)

    def read_line(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return read_line


def test_compression_ratio():
    assert session.compression_ratio(24, 3) == 8.0
    assert session.compression_ratio(0, 0) is None


def test_display_symbol():
    assert session.display_symbol("a") == "a"
    assert session.display_symbol("-") == "-"
    assert session.display_symbol(" ") == "' '"
    assert session.display_symbol("\t") == "'\\t'"


def test_tables_list_symbols_in_order():
    result = huff.compress_text("b a")
    freq_lines = session.format_frequency_table(result)
    assert freq_lines[0] == "Character | Frequency"
    assert [line.split("|")[0].strip() for line in freq_lines[2:]] == ["' '", "a", "b"]

    code_lines = session.format_code_table(result)
    assert code_lines[0] == "Character | Frequency | Code"
    for line in code_lines[2:]:
        _, freq, code = [part.strip() for part in line.split("|")]
        assert freq == "1"
        assert set(code) <= {"0", "1"}


def test_report_contents():
    out = io.StringIO()
    session.report(huff.compress_text("aaa"), out)
    text = out.getvalue()
    assert "Original String: aaa" in text
    assert "Encoded String: 000" in text
    assert "Decoded String: aaa" in text
    assert "Verification Successful" in text
    assert "Original Size: 24 bits" in text
    assert "Compressed Size: 3 bits" in text
    assert "Compression Ratio: 8.0000" in text


def test_report_empty_input_has_no_ratio():
    out = io.StringIO()
    session.report(huff.compress_text(""), out)
    assert "Compression Ratio: n/a" in out.getvalue()


def test_report_flags_mismatch():
    result = huff.compress_text("ab")
    result.decoded = "ba"
    out = io.StringIO()
    session.report(result, out)
    assert "Verification Failed" in out.getvalue()


def test_session_repeats_on_yes():
    out = io.StringIO()
    processed = session.run_session(_reader(["hello", "Y", "a b", "n"]), out)
    text = out.getvalue()
    assert processed == 2
    assert text.count("Enter a string: ") == 2
    assert "Original String: a b" in text
    assert text.rstrip().endswith("Thank you for using the Huffman Encoding Program!")


def test_session_stops_at_end_of_input():
    out = io.StringIO()
    processed = session.run_session(_reader(["abc", "y"]), out)
    assert processed == 1
    assert out.getvalue().count("Enter a string: ") == 2
    assert "Thank you" in out.getvalue()


def test_session_reports_codec_errors_and_continues(monkeypatch):
    def broken(text):
        raise huff.MalformedBitstringError("bitstring ends in the middle of a code")

    monkeypatch.setattr(huff, "compress_text", broken)
    out = io.StringIO()
    processed = session.run_session(_reader(["abc", "y", "def", "n"]), out)
    assert processed == 0
    assert out.getvalue().count("[error] bitstring ends in the middle of a code") == 2


def test_main_with_text(capsys):
    assert session.main(["--text", "hello world", "--text", ""]) == 0
    captured = capsys.readouterr()
    assert "Original String: hello world" in captured.out
    assert captured.out.count("Verification Successful") == 2


def test_main_reports_errors(monkeypatch, capsys):
    def broken(text):
        raise huff.InvalidInputError("cannot build a Huffman tree from an empty frequency table")

    monkeypatch.setattr(huff, "compress_text", broken)
    assert session.main(["--text", "abc"]) == 1
    assert "[error] 'abc'" in capsys.readouterr().err


def test_main_interactive_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("abc\nn\n"))
    assert session.main([]) == 0
    assert "Original String: abc" in capsys.readouterr().out


@pytest.mark.parametrize("text", ["x", "xx yy", "a-b c"])
def test_main_roundtrips(text, capsys):
    assert session.main(["--text", text]) == 0
    assert f"Decoded String: {text}\n" in capsys.readouterr().out
