# tests/test_cli.py

import json
import logging

import pytest

from cli import build_parser, main_cli
from utils.logging_config import JSONFormatter, setup_logging


@pytest.fixture
def photos(tmp_path, solid_image):
    folder = tmp_path / "photos"
    solid_image(folder / "big.png", size=(200, 200))
    solid_image(folder / "small.png", size=(40, 40))
    (folder / "readme.txt").write_text("not a photo")
    return folder


@pytest.fixture
def base_args(tmp_path):
    return ['--config', str(tmp_path / "no_config.yaml")]


def test_parser_defaults():
    args = build_parser().parse_args([])

    assert args.dir == '.'
    assert args.output is None
    assert args.thumbsize is None
    assert args.verbose is False


def test_run_prints_summary(photos, base_args, capsys, restore_logging):
    code = main_cli(['--dir', str(photos)] + base_args)

    out = capsys.readouterr().out
    assert code == 0
    assert "Total files scanned: 3" in out
    assert "Valid images found: 2" in out
    assert "Duplicates found: 1" in out
    assert "Files moved: 1" in out
    assert f"Output directory: {photos / 'duplicates'}" in out
    assert (photos / "duplicates" / "small.png").exists()


def test_custom_output_and_report(photos, tmp_path, base_args, restore_logging):
    out_dir = tmp_path / "moved"
    report = tmp_path / "report.json"

    code = main_cli([
        '--dir', str(photos), '--output', str(out_dir),
        '--thumbsize', '32', '--report', str(report)
    ] + base_args)

    assert code == 0
    assert (out_dir / "small.png").exists()
    data = json.loads(report.read_text())
    assert data['thumbnail_size'] == 32
    assert data['stats']['files_moved'] == 1
    assert data['stats']['moves'][0]['destination'] == str(out_dir / "small.png")
    assert data['relocated_bytes'] > 0


def test_dry_run(photos, base_args, capsys, restore_logging):
    code = main_cli(['--dir', str(photos), '--dry-run'] + base_args)

    out = capsys.readouterr().out
    assert code == 0
    assert "Files moved: 0" in out
    assert "Files that would be moved: 1" in out
    assert (photos / "small.png").exists()


def test_verbose_echoes_settings(photos, base_args, capsys, restore_logging):
    main_cli(['--dir', str(photos), '-v'] + base_args)

    out = capsys.readouterr().out
    assert f"Input Directory: {photos}" in out
    assert "Thumbnail Size: 200" in out


def test_config_file_supplies_defaults(photos, tmp_path, restore_logging):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("show_progress: false\ndetection:\n  thumbnail_size: 16\n")
    report = tmp_path / "r.json"

    main_cli(['--dir', str(photos), '--config', str(cfg), '--report', str(report)])

    assert json.loads(report.read_text())['thumbnail_size'] == 16


def test_unknown_log_level(photos, tmp_path, capsys, restore_logging):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("log_level: loud\n")

    code = main_cli(['--dir', str(photos), '--config', str(cfg)])

    assert code == 1
    assert "Unknown log level: LOUD" in capsys.readouterr().err
    assert (photos / "small.png").exists()


def test_missing_directory(tmp_path, base_args, capsys, restore_logging):
    code = main_cli(['--dir', str(tmp_path / "nope")] + base_args)

    assert code == 1
    assert "Error accessing directory" in capsys.readouterr().err


def test_file_instead_of_directory(tmp_path, base_args, capsys, restore_logging):
    target = tmp_path / "file.txt"
    target.write_text("x")

    code = main_cli(['--dir', str(target)] + base_args)

    assert code == 1
    assert "not a directory" in capsys.readouterr().err


def test_invalid_thumbsize(photos, base_args, capsys, restore_logging):
    code = main_cli(['--dir', str(photos), '--thumbsize', '0'] + base_args)

    assert code == 1
    assert "thumbnail_size" in capsys.readouterr().err


def test_fatal_move_error_skips_summary(photos, base_args, capsys, monkeypatch, restore_logging):
    import components.relocation as relocation
    from core.errors import MoveFailedError

    def refuse(source, destination):
        raise MoveFailedError(source, "read-only filesystem")

    monkeypatch.setattr(relocation, "move_file", refuse)

    code = main_cli(['--dir', str(photos)] + base_args)

    captured = capsys.readouterr()
    assert code == 1
    assert "read-only filesystem" in captured.err
    assert "Summary" not in captured.out


def test_log_dir_writes_files(tmp_path, restore_logging):
    log_dir = tmp_path / "logs"

    logger = setup_logging("INFO", log_dir=str(log_dir))
    logger.info("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello from the test" in (log_dir / "photo_dedup.log").read_text()
    line = (log_dir / "photo_dedup_structured.json").read_text().splitlines()[-1]
    assert json.loads(line)['message'] == "hello from the test"


def test_json_formatter():
    record = logging.LogRecord("x", logging.WARNING, __file__, 10, "value %d", (5,), None)

    data = json.loads(JSONFormatter().format(record))

    assert data['level'] == "WARNING"
    assert data['message'] == "value 5"
    assert data['logger'] == "x"


def test_setup_logging_rejects_unknown_level(restore_logging):
    with pytest.raises(ValueError, match="Unknown log level: VERBOSE"):
        setup_logging("verbose")
