"""
CLI Tests - acccom.py main() end to end.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io

import pytest
import acccom


class TestRunPrograms:

    def test_product_sum(self, capsys):
        assert acccom.main(["product_sum"]) == 0
        assert capsys.readouterr().out == "X=-25\n"

    def test_prime_list(self, capsys):
        assert acccom.main(["prime_list"]) == 0
        assert capsys.readouterr().out == "2 3 5 7 "

    def test_set_inputs(self, capsys):
        assert acccom.main(["product_sum", "--set", "0x100=3", "--set", "$102=4"]) == 0
        assert capsys.readouterr().out == "X=22\n"

    def test_interactive(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.StringIO("3\n4\n"))
        assert acccom.main(["product_sum", "--interactive"]) == 0
        out = capsys.readouterr().out
        assert "0100: A = " in out
        assert out.endswith("X=22\n")

    def test_interactive_bad_number(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.StringIO("seven\n"))
        assert acccom.main(["product_sum", "-i"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_interactive_empty_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.StringIO(""))
        assert acccom.main(["product_sum", "-i"]) == 1
        assert "end of input" in capsys.readouterr().err

    def test_dump(self, capsys):
        assert acccom.main(["product_sum", "--dump"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("[DATA]\n0100: 0007 8005 0000 000A 583D 0000\n[CODE]")
        assert "0100: 0007 8005 8019 000A 583D 0000" in out

    def test_trace(self, capsys):
        assert acccom.main(["product_sum", "--trace"]) == 0
        err = capsys.readouterr().err
        assert "$0200: LDA $100" in err
        assert "$020E: HLT" in err

    def test_pico_program(self, capsys):
        assert acccom.main(["pico_sum_squares", "--dump"]) == 0
        out = capsys.readouterr().out
        assert "0100: 0064 FF9C 4E20" in out

    def test_serial_output(self, capsys):
        assert acccom.main(["pyramid", "--serial", "loop://"]) == 0
        assert capsys.readouterr().out == ""

    def test_serial_not_opened_for_register_machine(self, capsys):
        # No such port; opening it would fail with exit status 1
        assert acccom.main(["pico_sum_squares", "--serial", "/dev/no-such-port"]) == 0


class TestImages:

    def test_illegal_instruction_exit_code(self, tmp_path, capsys):
        path = tmp_path / "bad.bin"
        path.write_bytes(bytes([0xE0, 0x00]))
        assert acccom.main(["--image", str(path)]) == 1
        err = capsys.readouterr().err
        assert "ILLEGAL" in err
        assert "IllegalInstruction at $0200 (IR=$E000)" in err

    def test_timeout_exit_code(self, tmp_path, capsys):
        path = tmp_path / "loop.bin"
        path.write_bytes(bytes([0x53, 0x00]))    # JMP $300
        assert acccom.main(["--image", str(path), "--base", "0x300",
                            "--max-steps", "10"]) == 1
        assert "TIMEOUT at $0300 after 10 steps" in capsys.readouterr().err

    def test_missing_image(self, tmp_path, capsys):
        assert acccom.main(["--image", str(tmp_path / "nope.bin")]) == 1
        assert "Error" in capsys.readouterr().err


class TestArguments:

    def test_list(self, capsys):
        assert acccom.main(["--list"]) == 0
        out = capsys.readouterr().out
        for name in ("product_sum", "quadratic", "prime_list", "pyramid", "pico_sum_squares"):
            assert name in out

    def test_bad_assignment(self, capsys):
        assert acccom.main(["product_sum", "--set", "0x100"]) == 1
        assert "ADDR=VALUE" in capsys.readouterr().err

    def test_requires_program_or_image(self):
        with pytest.raises(SystemExit) as exc:
            acccom.main([])
        assert exc.value.code == 2

    def test_program_and_image_conflict(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(bytes([0x80, 0x00]))
        with pytest.raises(SystemExit) as exc:
            acccom.main(["product_sum", "--image", str(path)])
        assert exc.value.code == 2

    def test_machine_needs_image(self):
        with pytest.raises(SystemExit) as exc:
            acccom.main(["product_sum", "--machine", "picomips"])
        assert exc.value.code == 2

    def test_unknown_program(self):
        with pytest.raises(SystemExit) as exc:
            acccom.main(["nonesuch"])
        assert exc.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            acccom.main(["--version"])
        assert exc.value.code == 0
        assert "acccom" in capsys.readouterr().out
