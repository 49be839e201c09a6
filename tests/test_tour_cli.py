import pytest

from tour_cli import main
from utils import EXIT_EMPTY_GRAPH, EXIT_FILE_ERROR


@pytest.fixture
def graph_file(tmp_path):
    path = tmp_path / "triangle.graph"
    path.write_text("# triangle\nA;1;B\nB;2;C\nC;3;A\n")
    return str(path)


def test_prints_tour(graph_file, capsys):
    assert main([graph_file]) == 0
    assert capsys.readouterr().out.strip() == "A C B A: 6"


def test_unsolvable_is_not_an_error(tmp_path, capsys):
    path = tmp_path / "line.graph"
    path.write_text("A;1;B\nB;1;C\n")
    assert main([str(path)]) == 0
    captured = capsys.readouterr()
    assert captured.out.strip() == "Graph is unsolvable: no tour returns to A"
    assert "not connected" not in captured.err


def test_disconnected_graph_warns(tmp_path, capsys):
    path = tmp_path / "split.graph"
    path.write_text("A;1;B\nC;1;D\n")
    assert main([str(path)]) == 0
    captured = capsys.readouterr()
    assert "unsolvable" in captured.out
    assert "not connected" in captured.err


def test_help(capsys):
    assert main(["-h"]) == 0
    assert "usage" in capsys.readouterr().out


def test_unknown_flag(graph_file, capsys):
    assert main(["-x", graph_file]) == 1
    captured = capsys.readouterr()
    assert "usage" in captured.err
    assert captured.out == ""


def test_unknown_flag_in_cluster(graph_file, capsys):
    assert main(["-vx", graph_file]) == 1
    assert "usage" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.graph")]) == EXIT_FILE_ERROR
    assert "Failed to open" in capsys.readouterr().err


def test_empty_graph(tmp_path, capsys):
    path = tmp_path / "empty.graph"
    path.write_text("only comments here\n")
    assert main([str(path)]) == 2
    assert "No nodes" in capsys.readouterr().err


def test_no_file_is_empty_graph(capsys):
    assert main([]) == 2


def test_second_file_ignored(graph_file, tmp_path, capsys):
    other = tmp_path / "other.graph"
    other.write_text("X;1;Y\n")
    assert main([graph_file, str(other)]) == 0
    captured = capsys.readouterr()
    assert captured.out.strip() == "A C B A: 6"
    assert "Ignoring" in captured.err


def test_silent_hides_warnings(graph_file, tmp_path, capsys):
    other = tmp_path / "other.graph"
    other.write_text("X;1;Y\n")
    assert main(["-s", graph_file, str(other)]) == 0
    captured = capsys.readouterr()
    assert captured.out.strip() == "A C B A: 6"
    assert captured.err == ""


def test_silent_still_reports_critical(tmp_path, capsys):
    assert main(["-s", str(tmp_path / "nope.graph")]) == EXIT_FILE_ERROR
    assert "Failed to open" in capsys.readouterr().err


def test_debug_lists_edges(graph_file, capsys):
    assert main(["-d", graph_file]) == 0
    err = capsys.readouterr().err
    assert "Node A: B-1 C-3" in err
    assert "Creating new node" in err


def test_verbosity_first_flag_wins(graph_file, capsys):
    assert main(["-vd", graph_file]) == 0
    err = capsys.readouterr().err
    assert "Verbosity already set" in err
    assert "Node A:" not in err
    assert "Searching tours" in err


def test_second_file_after_flag_ignored(graph_file, tmp_path, capsys):
    other = tmp_path / "other.graph"
    other.write_text("X;1;Y\n")
    assert main([graph_file, "-v", str(other)]) == 0
    captured = capsys.readouterr()
    assert captured.out.strip() == "A C B A: 6"
    assert "Ignoring" in captured.err


def test_flag_after_file(graph_file, capsys):
    assert main([graph_file, "-d"]) == 0
    assert "Node A: B-1 C-3" in capsys.readouterr().err


def test_non_utf8_ids(tmp_path, capsys):
    path = tmp_path / "latin.graph"
    path.write_bytes(b"\xe9;1;B\nB;2;C\nC;3;\xe9\n")
    assert main([str(path)]) == 0
    assert capsys.readouterr().out.strip() == "\xe9 C B \xe9: 6"


def test_missing_file_and_empty_graph_differ(tmp_path):
    empty = tmp_path / "empty.graph"
    empty.write_text("")
    assert main([str(empty)]) == EXIT_EMPTY_GRAPH
    assert main([str(tmp_path / "nope.graph")]) == EXIT_FILE_ERROR
    assert EXIT_FILE_ERROR != EXIT_EMPTY_GRAPH
