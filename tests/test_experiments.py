import csv

import pytest

import experiments as exp


@pytest.mark.parametrize("name", sorted(exp.GENERATOR_REGISTRY))
def test_generators_are_seeded(name):
    _, a = exp.generate_dataset(name, 256, seed=7)
    _, b = exp.generate_dataset(name, 256, seed=7)
    assert a == b
    assert len(a) == 256


def test_unknown_generator_falls_back():
    name, text = exp.generate_dataset("nope", 32, seed=1)
    assert name == "nope_fallback_uniform"
    assert len(text) == 32


def test_run_one_records_correct_roundtrip():
    _, text = exp.generate_dataset("english_like", 2048, seed=3)
    row = exp.run_one(text)
    assert row.correctness_ok == 1
    assert row.prefix_free == 1
    assert row.weighted_length_violations == 0
    assert row.original_bits == 2048 * 8
    assert 0 < row.compressed_bits < row.original_bits
    assert row.compression_ratio == row.compressed_bits / row.original_bits
    assert row.unique_symbols == len(set(text))


def test_run_one_single_symbol_and_empty():
    row = exp.run_one("aaaa")
    assert row.compressed_bits == 4
    assert row.correctness_ok == 1

    row = exp.run_one("")
    assert row.compressed_bits == 0
    assert row.compression_ratio == 0.0
    assert row.correctness_ok == 1


def test_csv_and_summary(tmp_path):
    rows = []
    for run_id in (1, 2):
        row = exp.run_one(exp.gen_zipf_like(512, seed=run_id))
        row.exp_name = "exp1_distribution"
        row.dataset_name = "zipf"
        row.run_id = run_id
        rows.append(row)

    exp.write_csv(tmp_path / "metrics.csv", rows)
    exp.group_summary(rows, tmp_path / "summary.csv")

    with (tmp_path / "metrics.csv").open(encoding="utf-8") as f:
        metrics = list(csv.DictReader(f))
    assert len(metrics) == 2
    assert metrics[0]["dataset_name"] == "zipf"

    with (tmp_path / "summary.csv").open(encoding="utf-8") as f:
        summary = list(csv.DictReader(f))
    assert len(summary) == 1
    assert summary[0]["n_runs"] == "2"
    assert float(summary[0]["correctness_ok_rate"]) == 1.0


def test_main_writes_outputs(tmp_path, capsys):
    status = exp.main([
        "--outdir", str(tmp_path), "--runs", "2", "--size", "256",
        "--generators", "uniform,single_symbol",
        "--min_size", "64", "--max_size", "256", "--scaling_generators", "english_like",
    ])
    assert status == 0
    assert (tmp_path / "metrics.csv").exists()
    assert (tmp_path / "summary.csv").exists()
    assert (tmp_path / "exp1_compression_ratio.png").exists()
    assert (tmp_path / "exp2_time_english_like.png").exists()
    assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out


def test_main_without_plots(tmp_path):
    assert exp.main(["--outdir", str(tmp_path), "--runs", "1", "--size", "64",
                     "--max_size", "32", "--no_plots"]) == 0
    assert not list(tmp_path.glob("*.png"))
