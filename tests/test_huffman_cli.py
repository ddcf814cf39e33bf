import io

import pytest

import huffman_cli


class TestCli:

    def run_main(self, monkeypatch, capsys, line):
        monkeypatch.setattr("sys.stdin", io.StringIO(line))
        code = huffman_cli.main()
        return code, capsys.readouterr()

    def test_abracadabra(self, monkeypatch, capsys):
        code, captured = self.run_main(monkeypatch, capsys, "abracadabra\n")
        lines = captured.out.splitlines()
        assert code == 0
        assert lines[0] == "Huffman codes:"
        code_lines = lines[1:-2]
        assert sorted(l.split(": ")[0] for l in code_lines) == ["a", "b", "c", "d", "r"]
        assert lines[-2].startswith("Encoded: ")
        assert len(lines[-2][len("Encoded: "):]) == 23
        assert lines[-1] == "Decoded: abracadabra"

    def test_prompt_goes_to_stderr(self, monkeypatch, capsys):
        _, captured = self.run_main(monkeypatch, capsys, "hi\n")
        assert "Enter text:" in captured.err
        assert "Enter text:" not in captured.out

    def test_decoded_keeps_spaces(self, monkeypatch, capsys):
        code, captured = self.run_main(monkeypatch, capsys, "  two  spaces \n")
        assert code == 0
        assert captured.out.splitlines()[-1] == "Decoded:   two  spaces "

    def test_single_symbol(self, monkeypatch, capsys):
        code, captured = self.run_main(monkeypatch, capsys, "zzzz\n")
        lines = captured.out.splitlines()
        assert code == 0
        assert lines[1] == "z: 0"
        assert lines[-2] == "Encoded: 0000"
        assert lines[-1] == "Decoded: zzzz"

    def test_empty_line(self, monkeypatch, capsys):
        code, captured = self.run_main(monkeypatch, capsys, "\n")
        assert code == 0
        assert captured.out.splitlines() == ["Huffman codes:", "Encoded: ", "Decoded: "]

    def test_read_line_strips_newline(self):
        assert huffman_cli.read_line(io.StringIO("text\r\nmore\n")) == "text"
