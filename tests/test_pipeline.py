from __future__ import annotations

import json
import math

import pandas as pd
import pytest

from pinboard.config import PipelineConfig, PipelinePaths
from pinboard.pipeline import load_pins, load_user_interests, run_pipeline


@pytest.fixture
def snapshot(tmp_path):
    data_dir = tmp_path / "raw"
    data_dir.mkdir()
    (data_dir / "pins.csv").write_text(
        "pin_id,title,tags,category,color,like_count,save_count,created_at\n"
        '1,Golden Sunset,"sunset,beach",nature,orange,0,0,2024-01-01\n'
        '2,Sunset Walk,"sunset,beach",nature,,0,0,2024-01-03\n'
        "3,Office desk,desk,work,,,,2024-01-02\n"
    )
    (data_dir / "user_interests.csv").write_text(
        "user_id,category,score\n"
        "u1,work,3\n"
        "u1,nature,1\n"
        "u2,nature,-2\n"
    )
    return PipelinePaths(data_dir=data_dir, output_dir=tmp_path / "out")


def test_load_pins_newest_first(snapshot):
    pins = load_pins(snapshot)
    assert [p.pin_id for p in pins] == ["2", "3", "1"]
    assert pins[0].tags == ["sunset", "beach"]
    assert pins[1].like_count == 0
    assert pins[2].color == "orange"


def test_load_user_interests_long_format(snapshot):
    interests = load_user_interests(snapshot)
    assert interests == {"u1": {"work": 3, "nature": 1}, "u2": {"nature": 0}}


def test_missing_interests_file(tmp_path):
    paths = PipelinePaths(data_dir=tmp_path)
    assert load_user_interests(paths) == {}


def test_run_pipeline_outputs(snapshot):
    outputs = run_pipeline(PipelineConfig(paths=snapshot))

    similar = pd.read_csv(outputs["similar_pins"], dtype=str)
    pairs = set(zip(similar["pin_id"], similar["similar_pin_id"]))
    assert pairs == {("1", "2"), ("2", "1")}

    feeds = pd.read_csv(outputs["ranked_feeds"], dtype={"user_id": str, "pin_id": str})
    u1 = feeds[feeds["user_id"] == "u1"].sort_values("rank")
    assert u1["pin_id"].tolist() == ["3", "2", "1"]
    u2 = feeds[feeds["user_id"] == "u2"].sort_values("rank")
    assert u2["pin_id"].tolist() == ["2", "3", "1"]

    tag_idf = pd.read_csv(outputs["tag_idf"])
    assert tag_idf.iloc[0]["tag"] == "desk"
    assert tag_idf.iloc[0]["idf"] == pytest.approx(math.log(3) + 1)

    metadata = json.loads(outputs["metadata"].read_text())
    assert metadata["n_pins"] == 3
    assert metadata["n_tags"] == 3
    assert metadata["n_users"] == 2
    assert metadata["n_similar_pairs"] == 2


def test_loaders_tolerate_float_counts_and_infinite_scores(tmp_path):
    (tmp_path / "pins.csv").write_text(
        "pin_id,title,like_count,save_count\n"
        "1,Chair,3.0,2.0\n"
        "2,Lamp,,\n"
    )
    (tmp_path / "user_interests.csv").write_text(
        "user_id,category,score\n"
        "u1,art,inf\n"
        "u1,tech,4\n"
    )
    paths = PipelinePaths(data_dir=tmp_path)

    pins = load_pins(paths)
    assert [(p.like_count, p.save_count) for p in pins] == [(3, 2), (0, 0)]
    assert load_user_interests(paths) == {"u1": {"tech": 4}}
