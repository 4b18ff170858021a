import pandas as pd
import pytest

import main
from file_type_handler import UnsupportedFileType


def test_version_flag(capsys):
    assert main.main(["-v"]) == 0
    out = capsys.readouterr().out.strip()
    assert out and out[0].isdigit()


def test_help_flag(capsys):
    assert main.main(["-h"]) == 0
    assert "cellgrid [path]" in capsys.readouterr().out


def test_too_many_paths(capsys):
    assert main.main(["a.csv", "b.csv"]) == 2
    assert "Usage" in capsys.readouterr().err


def test_load_state_without_path():
    state = main.load_state(None)
    assert state.file_handler is None
    assert len(state.sheet_order) == 1


def test_load_state_from_csv(tmp_path):
    path = tmp_path / "t.csv"
    pd.DataFrame({"k": [1, 2]}).to_csv(path, index=False)
    state = main.load_state(str(path))
    assert state.file_path == str(path)
    assert state.sheet.value_at("A1") == "k"
    assert state.sheet.value_at("A3") == 2


def test_load_state_rejects_unknown_type(tmp_path):
    with pytest.raises(UnsupportedFileType):
        main.load_state(str(tmp_path / "t.txt"))
