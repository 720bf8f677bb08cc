import pytest

from conftest import oversized_png, square_buffer
from iconmatte import cli
from iconmatte.pipeline import DEFAULT_ALGORITHMS


@pytest.fixture
def icon_file(tmp_path):
    path = tmp_path / "logo.png"
    square_buffer().to_image().save(path)
    return path


def test_list_algorithms(capsys):
    assert cli.main(["--list-algorithms"]) == 0
    out = capsys.readouterr().out
    for algorithm_id in DEFAULT_ALGORITHMS:
        assert algorithm_id in out


def test_local_algorithms_write_results(icon_file, tmp_path):
    out_dir = tmp_path / "results"
    code = cli.main(
        [
            "--algorithms", "icon,gimp,inkscape",
            "-o", str(out_dir),
            "--log-file", str(tmp_path / "debug.log"),
            str(icon_file),
        ]
    )

    assert code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "transparent-icon-gimp.png",
        "transparent-icon-icon.png",
        "transparent-icon-inkscape.png",
    ]


def test_default_output_dir_next_to_input(icon_file, tmp_path):
    code = cli.main(["-a", "icon", "--log-file", str(tmp_path / "debug.log"), str(icon_file)])

    assert code == 0
    assert (tmp_path / "logo_transparent" / "transparent-icon-icon.png").exists()


def test_unreadable_input_fails(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"nope")

    assert cli.main(["-a", "icon", "--log-file", str(tmp_path / "debug.log"), str(bad)]) == 1


def test_oversized_input_does_not_stop_batch(icon_file, tmp_path):
    big = tmp_path / "big.png"
    big.write_bytes(oversized_png())
    log_file = str(tmp_path / "debug.log")

    code = cli.main(["-a", "icon", "--log-file", log_file, str(big), str(icon_file)])

    assert code == 1
    assert (tmp_path / "logo_transparent" / "transparent-icon-icon.png").exists()


def test_unknown_algorithm_is_a_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--algorithms", "icon,magic", "x.png"])
    assert exc.value.code == 2


def test_build_config_overrides():
    args = cli.build_parser().parse_args(
        ["--tolerance", "60", "--feather-radius", "0", "--threshold", "90", "--no-smoothing", "--timeout", "5", "x.png"]
    )
    config = cli.build_config(args)

    assert config.icon.tolerance == 60
    assert config.icon.smoothing is False
    assert config.inkscape.smoothing is False
    assert config.gimp.feather_radius == 0
    assert config.inkscape.threshold == 90
    assert config.segmentation.timeout_seconds == 5
    assert config.algorithms == DEFAULT_ALGORITHMS
