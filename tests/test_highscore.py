from core.highscore import HighScoreStore


def test_missing_file_is_zero(tmp_path):
    assert HighScoreStore(str(tmp_path / "nope.json")).load() == 0


def test_save_keeps_the_best(tmp_path):
    store = HighScoreStore(str(tmp_path / "sub" / "hs.json"))
    assert store.save(12) == 12
    assert store.save(4) == 12
    assert store.load() == 12


def test_corrupt_file_is_zero(tmp_path):
    path = tmp_path / "hs.json"
    for junk in ("{not json", "17", '{"high_score": "lots"}'):
        path.write_text(junk)
        assert HighScoreStore(str(path)).load() == 0
