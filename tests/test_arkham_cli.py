import pytest

from arkham_cli import main


class TestCli:
    """Tests for the command-line front end"""

    def test_prints_chance(self, capsys):
        assert main(["5", "2"]) == 0
        out = capsys.readouterr().out
        assert "Rolling 5 dice, 2 successes needed (normal: successes on 5, 6)" in out
        assert "Chance of Success: 53.91%" in out

    def test_status_and_precision(self, capsys):
        main(["3", "2", "--status", "blessed", "--precision", "1"])
        out = capsys.readouterr().out
        assert "successes on 4, 5, 6" in out
        assert "Chance of Success: 50.0%" in out

    def test_impossible_roll_reports_zero(self, capsys):
        main(["2", "3"])
        assert "Chance of Success: 0.00%" in capsys.readouterr().out

    def test_table(self, capsys):
        main(["3", "1", "--status", "cursed", "--table"])
        out = capsys.readouterr().out
        assert "At least  Chance" in out
        rows = [line for line in out.splitlines() if line.strip().startswith(("0 ", "1 ", "2 ", "3 "))]
        assert len(rows) == 4
        assert rows[0].split()[-1] == "100.00%"

    def test_simulate(self, capsys):
        main(["4", "2", "--simulate", "20000", "--seed", "5"])
        out = capsys.readouterr().out
        assert "Simulated (20000 rolls):" in out
        assert "points)" in out

    def test_sample_roll(self, capsys):
        main(["6", "2", "--roll", "--seed", "9"])
        out = capsys.readouterr().out
        line = next(row for row in out.splitlines() if row.startswith("Sample roll:"))
        faces, verdict = line[len("Sample roll: "):].split(" -> ")
        rolled = [int(face) for face in faces.split()]
        assert len(rolled) == 6
        assert all(1 <= face <= 6 for face in rolled)
        hits = sum(1 for face in rolled if face >= 5)
        assert verdict == f"{hits} successes ({'passed' if hits >= 2 else 'failed'})"

    @pytest.mark.parametrize("argv", [
        ["0", "1"],
        ["21", "1"],
        ["5", "0"],
        ["5", "2", "--status", "lucky"],
        ["5", "2", "--precision", "-1"],
        ["5", "2", "--simulate", "0"],
        ["20", "2", "--simulate", "1000001"],
    ])
    def test_rejects_bad_input(self, argv, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(argv)
        assert excinfo.value.code == 2
