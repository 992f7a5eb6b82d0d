"""
Tests for the command-line interface and user configuration.
"""

import io
import json

import pytest

from photoprint.cli import CLIOrchestrator, main, parse_arguments
from photoprint.imaging import ImageGateway
from photoprint.config import COMMENT_KEY, FINGERPRINT_SIZE
from photoprint.models import WorkerMode
from photoprint.user_config import get_user_config


def run_cli(argv):
    stream = io.StringIO()
    orchestrator = CLIOrchestrator(argv, stream=stream)
    code = orchestrator.run()
    return code, stream.getvalue(), orchestrator


class TestArgumentParsing:
    """Test flag parsing."""

    def test_defaults_left_unset(self):
        args = parse_arguments(['-m', '-s', '/photos'])
        assert args.metadata
        assert args.threads is None
        assert args.size is None

    def test_size_and_extensions(self):
        args = parse_arguments(['-g', '-s', 'a', '-d', 'b', '--size', '64x32', '--extensions', 'jpg,PNG'])
        assert args.size == (64, 32)
        assert args.extensions == frozenset({'.jpg', '.png'})

    def test_rejects_bad_size(self):
        with pytest.raises(SystemExit):
            parse_arguments(['-g', '--size', 'big'])

    def test_rejects_bad_depth(self):
        with pytest.raises(SystemExit):
            parse_arguments(['-g', '--depth', '16'])


class TestConfigurationErrors:
    """Invalid configuration exits with code 1 before any work starts."""

    def test_no_mode(self, photo_dirs):
        assert main(['-s', str(photo_dirs['photos'])]) == 1

    def test_two_modes(self, photo_dirs):
        assert main(['-g', '-m', '-s', str(photo_dirs['photos']), '-d', str(photo_dirs['fingerprints'])]) == 1

    def test_missing_thresholds(self, photo_dirs):
        argv = ['-f', '-s', str(photo_dirs['fingerprints']), '-d', str(photo_dirs['search'])]
        assert main(argv) == 1

    def test_zero_threads(self, photo_dirs):
        assert main(['-m', '-s', str(photo_dirs['photos']), '-t', '0']) == 1

    def test_missing_source(self, temp_dir):
        assert main(['-m', '-s', str(temp_dir / 'nope')]) == 1

    def test_error_is_logged(self, photo_dirs, caplog):
        with caplog.at_level("ERROR"):
            main(['-m', '-s', str(photo_dirs['photos']), '-t', '0'])
        assert "Thread count must be at least 1" in caplog.text


class TestModes:
    """Run each mode end to end through the CLI."""

    def test_metadata(self, photo_dirs, make_photo):
        dated = make_photo(photo_dirs['photos'] / "dated.jpg", taken="2021:12:24 09:00:00")
        make_photo(photo_dirs['photos'] / "plain.png")

        code, output, _ = run_cli(['-m', '-s', str(photo_dirs['photos']), '-t', '2', '--no-progress'])

        assert code == 0
        assert output.splitlines() == [f"{dated}\t2021-12-24 09:00:00"]

    def test_generate_then_find(self, photo_dirs, make_photo):
        original = make_photo(photo_dirs['photos'] / "sunset.jpg", seed=11)
        copy = photo_dirs['search'] / "IMG_0001.jpg"
        copy.write_bytes(original.read_bytes())
        make_photo(photo_dirs['search'] / "unrelated.jpg", seed=12)

        code, _, _ = run_cli([
            '-g', '-s', str(photo_dirs['photos']), '-d', str(photo_dirs['fingerprints']), '--no-progress',
        ])
        assert code == 0
        assert (photo_dirs['fingerprints'] / "sunset.tif").exists()

        pairs_file = photo_dirs['photos'].parent / "pairs.json"
        code, output, orchestrator = run_cli([
            '-f', '-s', str(photo_dirs['fingerprints']), '-d', str(photo_dirs['search']),
            '--low-threshold', '10', '--high-threshold', '1000',
            '--pairs-output', str(pairs_file), '--no-progress',
        ])

        assert code == 0
        records = [json.loads(line) for line in output.splitlines()]
        assert records == [{
            "candidate": str(copy),
            "match": str(original),
            "classification": "identical",
            "score": 0,
        }]
        assert json.loads(pairs_file.read_text(encoding="utf-8")) == [[str(copy), str(original)]]
        assert orchestrator.options.mode is WorkerMode.FIND_DUPLICATES

    def test_custom_size_and_depth(self, photo_dirs, make_photo):
        make_photo(photo_dirs['photos'] / "a.png")

        code, _, _ = run_cli([
            '-g', '-s', str(photo_dirs['photos']), '-d', str(photo_dirs['fingerprints']),
            '--size', '20x10', '--depth', '8', '--no-progress',
        ])

        assert code == 0
        restored = ImageGateway().decode(photo_dirs['fingerprints'] / "a.tif")
        assert restored.size == (20, 10)
        assert restored.mode == "RGB"
        assert ImageGateway().get_attribute(restored, COMMENT_KEY).endswith("a.png")

    def test_matches_only_collected_for_pair_export(self, photo_dirs, make_photo):
        original = make_photo(photo_dirs['photos'] / "a.jpg", seed=4)
        (photo_dirs['search'] / "copy.jpg").write_bytes(original.read_bytes())
        run_cli(['-g', '-s', str(photo_dirs['photos']), '-d', str(photo_dirs['fingerprints']), '--no-progress'])

        code, output, orchestrator = run_cli([
            '-f', '-s', str(photo_dirs['fingerprints']), '-d', str(photo_dirs['search']),
            '--low-threshold', '10', '--high-threshold', '1000', '--no-progress',
        ])

        assert code == 0
        assert len(output.splitlines()) == 1
        assert orchestrator.options.collect_matches is False
        assert orchestrator.stats.matches == []

    def test_unwritable_pairs_output_is_config_error(self, photo_dirs, make_photo):
        make_photo(photo_dirs['search'] / "a.jpg")
        pairs_file = photo_dirs['photos'] / "missing" / "pairs.json"

        code, output, orchestrator = run_cli([
            '-f', '-s', str(photo_dirs['fingerprints']), '-d', str(photo_dirs['search']),
            '--low-threshold', '10', '--high-threshold', '1000',
            '--pairs-output', str(pairs_file), '--no-progress',
        ])

        assert code == 1
        assert output == ""
        assert orchestrator.stats is None

    def test_pairs_write_failure_exits_with_error(self, photo_dirs, monkeypatch, caplog):
        def fail(results, path):
            raise OSError("disk full")

        monkeypatch.setattr("photoprint.cli.orchestrator.export_pairs", fail)
        pairs_file = photo_dirs['photos'].parent / "pairs.json"

        with caplog.at_level("ERROR"):
            code, _, _ = run_cli([
                '-f', '-s', str(photo_dirs['fingerprints']), '-d', str(photo_dirs['search']),
                '--low-threshold', '10', '--high-threshold', '1000',
                '--pairs-output', str(pairs_file), '--no-progress',
            ])

        assert code == 1
        assert "disk full" in caplog.text

    def test_pairs_output_ignored_outside_find(self, photo_dirs, caplog):
        pairs_file = photo_dirs['photos'].parent / "pairs.json"
        with caplog.at_level("WARNING"):
            code, _, _ = run_cli(['-m', '-s', str(photo_dirs['photos']), '--pairs-output', str(pairs_file)])
        assert code == 0
        assert not pairs_file.exists()


class TestUserConfig:
    """User configuration feeds options the flags leave unset."""

    def test_defaults(self):
        config = get_user_config()
        assert config.low_threshold is None
        assert config.high_threshold is None
        assert config.fingerprint_size == FINGERPRINT_SIZE

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv('PHOTOPRINT_WORKERS', '3')
        monkeypatch.setenv('PHOTOPRINT_SIZE', '64x64')
        monkeypatch.setenv('PHOTOPRINT_EXTENSIONS', 'jpg,png')
        config = get_user_config()
        assert config.default_workers == 3
        assert config.fingerprint_size == (64, 64)
        assert config.extensions == frozenset({'.jpg', '.png'})

    def test_config_file_supplies_thresholds(self, photo_dirs, make_photo):
        config = get_user_config()
        config.config_dir.mkdir(parents=True, exist_ok=True)
        config.config_file_path.write_text(
            json.dumps({"low_threshold": 10, "high_threshold": 1000, "default_workers": 2}),
            encoding="utf-8",
        )
        config.reload()

        code, _, orchestrator = run_cli([
            '-f', '-s', str(photo_dirs['fingerprints']), '-d', str(photo_dirs['search']), '--no-progress',
        ])

        assert code == 0
        assert orchestrator.options.low_threshold == 10.0
        assert orchestrator.options.high_threshold == 1000.0
        assert orchestrator.options.threads == 2

    def test_flags_beat_config(self, photo_dirs):
        config = get_user_config()
        config.config_dir.mkdir(parents=True, exist_ok=True)
        config.config_file_path.write_text(json.dumps({"default_workers": 2}), encoding="utf-8")
        config.reload()

        code, _, orchestrator = run_cli(['-m', '-s', str(photo_dirs['photos']), '-t', '5'])

        assert code == 0
        assert orchestrator.options.threads == 5

    def test_create_example_config(self):
        config = get_user_config()
        assert config.create_example_config()
        data = json.loads(config.config_file_path.read_text(encoding="utf-8"))
        assert data["low_threshold"] is None
        assert data["fingerprint_size"] == list(FINGERPRINT_SIZE)
