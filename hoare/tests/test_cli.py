"""
Tests for the hoare command
"""

import pytest
from hoare.cli import main


SOURCE = '''from hoare import precond, debug_postcond

@precond("x > 0")
@debug_postcond("return > x")
def inc(x):
    return x + 1
'''


@pytest.fixture
def module_file(tmp_path):
    path = tmp_path / "inc.py"
    path.write_text(SOURCE, encoding="utf-8")
    return path


def test_rewrite_to_stdout(module_file, capsys):
    """Test the rewritten module is printed"""
    assert main([str(module_file), "--debug"]) == 0
    out = capsys.readouterr().out
    assert "Precondition of inc (x > 0)" in out
    assert "Postcondition of inc (return > x)" in out


def test_release_skips_debug_contracts(module_file, capsys):
    """Test --release leaves debug_ contracts in place"""
    assert main([str(module_file), "--release"]) == 0
    out = capsys.readouterr().out
    assert "Precondition of inc" in out
    assert "Postcondition" not in out
    assert "@debug_postcond('return > x')" in out


def test_write_output_file(module_file, tmp_path):
    """Test -o writes the rewritten module"""
    target = tmp_path / "build" / "inc.py"
    assert main([str(module_file), "-o", str(target)]) == 0
    assert "_hoare_result_" in target.read_text(encoding="utf-8")


def test_list_mode(module_file, capsys):
    """Test --list prints declarations and their contracts"""
    assert main([str(module_file), "--list"]) == 0
    out = capsys.readouterr().out
    assert "inc:5 (function)" in out
    assert "@precond 'x > 0'" in out


def test_diagnostics_fail_the_command(tmp_path, capsys):
    """Test contract errors give exit status 1 and a summary"""
    path = tmp_path / "bad.py"
    path.write_text('@precond(3)\ndef f():\n    pass\n', encoding="utf-8")
    assert main([str(path)]) == 1
    err = capsys.readouterr().err
    assert "MalformedContract" in err


def test_missing_file(capsys):
    """Test a missing input file is reported"""
    assert main(["does/not/exist.py"]) == 1
    assert "File not found" in capsys.readouterr().err
