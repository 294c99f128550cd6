import pandas as pd
import pytest
import yaml

from loadsched import Generator, UnknownTriggerTargetError
from loadsched.constants import Columns as C
from loadsched.constants import Keys as K


@pytest.fixture
def generator(boiler_config):
    gen = Generator()
    gen.add_sites({"house": boiler_config})
    return gen


def test_generator_runs_basic_case(generator):
    summary, runs = generator.generate((0, 72), seed=1, show_progress=False)

    assert "house" in summary.index
    assert summary.loc["house", C.REQUESTS] == 2
    assert summary.loc["house", C.RUNS_TRIGGERED] > 0

    df = runs["house"]
    assert not df.empty
    assert summary.loc["house", C.RUNS] == len(df.drop_duplicates([C.NAME, C.START, C.TRIGGERED]))
    assert df[C.START].between(0, 72).all()
    assert df[C.START].is_monotonic_increasing


def test_generator_is_reproducible(generator):
    _, a = generator.generate((0, 100), seed=3, show_progress=False)
    _, b = generator.generate((0, 100), seed=3, show_progress=False)
    pd.testing.assert_frame_equal(a["house"], b["house"])


def test_generator_with_reference_index(generator):
    index = pd.date_range("2024-06-01 06:00", "2024-06-03 18:00", freq="h")
    _, runs = generator.generate(index, seed=2, show_progress=False)
    df = runs["house"]
    assert C.DATETIME in df.columns
    assert (df[C.DATETIME] >= pd.Timestamp("2024-06-01 06:00")).all()


def test_generator_collects_unknown_trigger(boiler_config):
    boiler_config["boiler"]["trigger"] = [{"other": "ghost"}]
    gen = Generator()
    gen.add_sites({"house": boiler_config})

    summary, runs = gen.generate((0, 48), seed=0, show_progress=False)

    assert "ghost" in summary.loc["house", K.ERROR]
    assert not runs["house"].empty


def test_generator_raises_on_unknown_trigger(boiler_config):
    boiler_config["boiler"]["trigger"] = [{"other": "ghost"}]
    gen = Generator(raise_on_error=True)
    gen.add_sites({"house": boiler_config})

    with pytest.raises(UnknownTriggerTargetError, match="ghost"):
        gen.generate((0, 48), seed=0, show_progress=False)


def test_generator_requires_sites():
    with pytest.raises(ValueError, match="No sites"):
        Generator().generate((0, 24), show_progress=False)


def test_generator_from_site_file(tmp_path, boiler_config):
    path = tmp_path / "site.yaml"
    path.write_text(yaml.safe_dump({"consumption": boiler_config}))

    gen = Generator()
    gen.add_site_file(str(path), name="file_house")
    gen.add_sites({"empty": {}})
    summary, runs = gen.generate((0, 48), seed=5, show_progress=False)

    assert set(summary.index) == {"file_house", "empty"}
    assert summary.loc["empty", C.RUNS] == 0
    assert runs["empty"].empty


def test_summary_matches_run_table_for_runs_without_usage(boiler_config):
    boiler_config["boiler"]["trigger"] = [{"other": "signal"}]
    boiler_config["signal"] = {"usage": []}
    gen = Generator()
    gen.add_sites({"house": boiler_config})

    summary, runs = gen.generate((0, 48), seed=4, show_progress=False)

    df = runs["house"]
    assert summary.loc["house", C.RUNS] == len(df.drop_duplicates([C.NAME, C.START, C.TRIGGERED]))
    assert (df[C.NAME] == "signal").sum() == summary.loc["house", C.RUNS_TRIGGERED]
