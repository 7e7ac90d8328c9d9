import scripts.simulate_games as sim


def test_batch_run_writes_pitch_log(tmp_path, capsys) -> None:
    out = tmp_path / "log.csv"
    sim.main(["--games", "2", "--seed", "9", "--difficulty", "ROOKIE", "--csv", str(out)])
    printed = capsys.readouterr().out
    assert "Games: 2" in printed
    assert "Outcome rate per pitch" in printed
    assert "player" in printed and "computer" in printed
    assert out.exists()
    header = out.read_text(encoding="utf-8").splitlines()[0]
    assert "type" in header and "game" in header


def test_same_seed_gives_same_report() -> None:
    args = sim._parse_args(["--games", "1", "--seed", "4"])
    first = sim.run(args)
    second = sim.run(args)
    assert first.equals(second)
