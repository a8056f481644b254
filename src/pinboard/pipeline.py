from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd

from .config import PipelineConfig, PipelinePaths
from .interests import clamp_interests
from .models import Pin
from .ranking import interest_weight, rank_feed
from .similarity import find_similar_pins, tag_document_frequencies

LOGGER = logging.getLogger(__name__)


def load_pins(paths: PipelinePaths) -> List[Pin]:
    pins_path = paths.resolved_pins_csv()
    df = pd.read_csv(pins_path, dtype=str)
    if "created_at" in df.columns:
        df["created_at"] = pd.to_datetime(df["created_at"], errors="coerce", utc=True)
        df = df.sort_values(by="created_at", ascending=False, kind="mergesort", na_position="last")
        df["created_at"] = df["created_at"].apply(lambda ts: ts.isoformat() if pd.notna(ts) else None)
    df = df.astype(object).where(df.notna(), None)
    return [Pin.from_record(record) for record in df.to_dict(orient="records")]


def load_user_interests(paths: PipelinePaths) -> Dict[str, Dict[str, int]]:
    interests_path = paths.resolved_user_interests_csv()
    if not interests_path.exists():
        return {}
    df = pd.read_csv(interests_path, dtype={"user_id": str, "category": str})
    df["category"] = df["category"].fillna("")
    df["score"] = pd.to_numeric(df["score"], errors="coerce")
    df = df.dropna(subset=["user_id", "score"])
    grouped = df.groupby("user_id")[["category", "score"]]
    return {
        user_id: clamp_interests(dict(zip(group["category"], group["score"])))
        for user_id, group in grouped
    }


def build_tag_idf_table(pins: List[Pin]) -> pd.DataFrame:
    freqs = tag_document_frequencies(pins)
    if not freqs:
        return pd.DataFrame(columns=["tag", "doc_freq", "idf"])
    table = pd.DataFrame(sorted(freqs.items()), columns=["tag", "doc_freq"])
    table["idf"] = np.log(len(pins) / np.maximum(table["doc_freq"], 1)) + 1.0
    return table.sort_values(by=["idf", "tag"], ascending=[False, True]).reset_index(drop=True)


def build_similar_pins(pins: List[Pin], config: PipelineConfig) -> pd.DataFrame:
    rows = []
    for target in pins:
        matches = find_similar_pins(target, pins, top_n=config.top_n_similar, weights=config.weights)
        for rank, item in enumerate(matches, start=1):
            rows.append(
                {
                    "pin_id": target.pin_id,
                    "similar_pin_id": item.pin.pin_id,
                    "rank": rank,
                    "score": round(item.score, 4),
                }
            )
    return pd.DataFrame(rows, columns=["pin_id", "similar_pin_id", "rank", "score"])


def build_ranked_feeds(pins: List[Pin], user_interests: Dict[str, Dict[str, int]]) -> pd.DataFrame:
    rows = []
    for user_id in sorted(user_interests):
        interests = user_interests[user_id]
        for rank, pin in enumerate(rank_feed(pins, interests), start=1):
            rows.append(
                {
                    "user_id": user_id,
                    "pin_id": pin.pin_id,
                    "rank": rank,
                    "interest_weight": interest_weight(pin, interests),
                }
            )
    return pd.DataFrame(rows, columns=["user_id", "pin_id", "rank", "interest_weight"])


def run_pipeline(config: PipelineConfig) -> Dict[str, Path]:
    paths = config.paths
    output_dir = paths.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    pins = load_pins(paths)
    user_interests = load_user_interests(paths)
    LOGGER.info("Loaded %d pins and %d user interest profiles", len(pins), len(user_interests))

    tag_idf = build_tag_idf_table(pins)
    similar = build_similar_pins(pins, config)
    feeds = build_ranked_feeds(pins, user_interests)

    outputs = {
        "tag_idf": output_dir / "tag_idf.csv",
        "similar_pins": output_dir / "similar_pins.csv",
        "ranked_feeds": output_dir / "ranked_feeds.csv",
        "metadata": output_dir / "metadata.json",
    }

    tag_idf.to_csv(outputs["tag_idf"], index=False)
    similar.to_csv(outputs["similar_pins"], index=False)
    feeds.to_csv(outputs["ranked_feeds"], index=False)

    metadata = {
        "n_pins": len(pins),
        "n_tags": int(len(tag_idf)),
        "n_users": len(user_interests),
        "n_similar_pairs": int(len(similar)),
        "top_n_similar": config.top_n_similar,
    }
    outputs["metadata"].write_text(json.dumps(metadata, indent=2))
    LOGGER.info("Wrote %d similar-pin pairs and %d feed rows", len(similar), len(feeds))
    return outputs


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Precompute similar pins and interest-ranked feeds from a CSV snapshot."
    )
    parser.add_argument("--data-dir", type=str, default="data/raw", help="Directory containing CSV inputs.")
    parser.add_argument("--pins-csv", type=str, default="", help="Pins CSV (defaults to <data-dir>/pins.csv).")
    parser.add_argument("--interests-csv", type=str, default="", help="Long-format user_id,category,score CSV.")
    parser.add_argument("--output-dir", type=str, default="output/pinboard", help="Where to place generated tables.")
    parser.add_argument("--top-n", type=int, default=10, help="How many similar pins to keep per pin.")
    return parser.parse_args()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = _parse_args()
    paths = PipelinePaths(
        data_dir=Path(args.data_dir),
        output_dir=Path(args.output_dir),
        pins_csv=Path(args.pins_csv) if args.pins_csv else None,
        user_interests_csv=Path(args.interests_csv) if args.interests_csv else None,
    )
    config = PipelineConfig(paths=paths, top_n_similar=args.top_n)
    run_pipeline(config)
    print(f"[pinboard] Scoring artifacts saved to: {paths.output_dir.resolve()}")


if __name__ == "__main__":
    main()
