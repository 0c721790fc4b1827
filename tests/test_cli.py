import json
import logging
import types
from contextlib import contextmanager

import pytest
from click.testing import CliRunner

import subextract.cli as cli
import subextract.cli_commands as cli_commands
from subextract.config import ExtractionSettings
from subextract.core.models import Cue, ExtractionResult
from subextract.exceptions import VideoError


class _DummyExtractor:
    last_instance = None
    cues = [
        Cue(start=1.0, end=2.5, text="Hello there", confidence=91.0),
        Cue(start=3.0, end=4.0, text="General Kenobi", confidence=0.0),
    ]
    error = None

    def __init__(self, settings=None, backend=None):
        self.settings = settings
        self.backend = backend
        self.extract_args = None
        _DummyExtractor.last_instance = self

    def extract(self, video_path, on_progress=None, cancel_event=None):
        self.extract_args = (video_path, on_progress)
        if self.error is not None:
            raise self.error
        return ExtractionResult(cues=list(self.cues), duration=5.0, samples=10)


@pytest.fixture
def dummy_extractor(monkeypatch):
    _DummyExtractor.last_instance = None
    _DummyExtractor.error = None
    monkeypatch.setattr(cli_commands, "SubtitleExtractor", _DummyExtractor)
    return _DummyExtractor


def test_extract_writes_srt_beside_video(dummy_extractor, mock_video_file):
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["extract", str(mock_video_file), "--no-progress"])

    assert result.exit_code == 0, result.output
    srt = mock_video_file.with_name("test_video.srt").read_text(encoding="utf-8")
    assert srt.startswith("1\n00:00:01,000 --> 00:00:02,500\nHello there\n")
    assert dummy_extractor.last_instance.backend == "tesseract"
    assert dummy_extractor.last_instance.extract_args[1] is None


def test_extract_format_follows_output_suffix(dummy_extractor, mock_video_file, temp_dir):
    output = temp_dir / "subs" / "out.json"
    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        ["extract", str(mock_video_file), "-o", str(output), "--no-progress"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert [cue["text"] for cue in payload["cues"]] == ["Hello there", "General Kenobi"]


def test_extract_clamps_out_of_range_options(dummy_extractor, mock_video_file):
    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        [
            "extract",
            str(mock_video_file),
            "--interval",
            "50",
            "--region-y",
            "120",
            "--region-height",
            "2",
            "--min-confidence=-5",
            "--similarity",
            "0.1",
            "--no-preprocess",
            "--language",
            "fra",
            "--no-progress",
        ],
    )

    assert result.exit_code == 0, result.output
    settings = dummy_extractor.last_instance.settings
    assert settings.frame_interval_ms == 100
    assert settings.region_y_percent == 100
    assert settings.region_height_percent == 5
    assert settings.min_confidence == 0
    assert settings.similarity_threshold == 0.5
    assert settings.preprocess is False
    assert settings.language == "fra"


def test_extract_show_cues_prints_confidence(dummy_extractor, mock_video_file):
    runner = CliRunner()
    result = runner.invoke(
        cli.cli, ["extract", str(mock_video_file), "--no-progress", "--show-cues"]
    )

    assert result.exit_code == 0, result.output
    assert "00:00:01,000 → 00:00:02,500  Hello there  (91% confidence)" in result.output
    assert "General Kenobi\n" in result.output


def test_extract_passes_progress_bar(dummy_extractor, mock_video_file):
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["extract", str(mock_video_file)])

    assert result.exit_code == 0, result.output
    assert callable(dummy_extractor.last_instance.extract_args[1])


def test_extract_missing_video_exits_nonzero(dummy_extractor, temp_dir):
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["extract", str(temp_dir / "missing.mp4")])

    assert result.exit_code == 1
    assert dummy_extractor.last_instance is None


def test_extract_output_format_mismatch_exits_nonzero(dummy_extractor, mock_video_file):
    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        ["extract", str(mock_video_file), "-o", "out.srt", "--format", "vtt"],
    )
    assert result.exit_code == 1


def test_extract_video_error_exits_nonzero(dummy_extractor, mock_video_file):
    dummy_extractor.error = VideoError("Could not open video")
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["extract", str(mock_video_file), "--no-progress"])

    assert result.exit_code == 1
    assert not mock_video_file.with_name("test_video.srt").exists()


def test_languages_lists_codes():
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["languages"])

    assert result.exit_code == 0
    assert "eng  English" in result.output
    assert "ita  Italian" in result.output


def _fake_open_video(video):
    @contextmanager
    def opener(_path):
        try:
            yield video
        finally:
            video.release()

    return opener


def test_preview_writes_region_image(monkeypatch, mock_video_file, fake_video):
    video = fake_video(duration=10.0)
    monkeypatch.setattr(cli_commands, "open_video", _fake_open_video(video))

    runner = CliRunner()
    result = runner.invoke(cli.cli, ["preview", str(mock_video_file), "--time", "2.5"])

    assert result.exit_code == 0, result.output
    assert video.seeks == [2.5]
    assert video.released
    assert mock_video_file.with_name("test_video_region_2.50s.png").exists()


def test_preview_time_past_end_exits_nonzero(monkeypatch, mock_video_file, fake_video):
    video = fake_video(duration=3.0)
    monkeypatch.setattr(cli_commands, "open_video", _fake_open_video(video))

    runner = CliRunner()
    result = runner.invoke(cli.cli, ["preview", str(mock_video_file), "--time", "3"])

    assert result.exit_code == 1
    assert video.seeks == []


def test_preview_image_write_failure(mock_video_file, fake_video):
    video = fake_video(duration=10.0)
    with pytest.raises(SystemExit) as excinfo:
        cli_commands.run_preview_command(
            logger=logging.getLogger("test"),
            video=str(mock_video_file),
            time=1.0,
            output=None,
            region_y=80,
            region_height=20,
            preprocess=True,
            open_video_fn=_fake_open_video(video),
            imwrite_fn=lambda _path, _image: False,
        )
    assert excinfo.value.code == 1


def test_preview_rejects_unwritable_image_type(monkeypatch, mock_video_file, fake_video, temp_dir):
    video = fake_video(duration=5.0)
    monkeypatch.setattr(cli_commands, "open_video", _fake_open_video(video))
    output = temp_dir / "out.txt"

    runner = CliRunner()
    result = runner.invoke(
        cli.cli, ["preview", str(mock_video_file), "--time", "1", "-o", str(output)]
    )

    assert result.exit_code == 1
    assert video.seeks == []
    assert not output.exists()


def test_preview_unexpected_write_error_exits_nonzero(mock_video_file, fake_video, temp_dir):
    def broken_imwrite(_path, _image):
        raise RuntimeError("encoder crashed")

    with pytest.raises(SystemExit) as excinfo:
        cli_commands.run_preview_command(
            logger=logging.getLogger("test"),
            video=str(mock_video_file),
            time=1.0,
            output=str(temp_dir / "band.png"),
            region_y=80,
            region_height=20,
            preprocess=True,
            open_video_fn=_fake_open_video(fake_video(duration=5.0)),
            imwrite_fn=broken_imwrite,
        )
    assert excinfo.value.code == 1


def test_extract_rejects_unsupported_language_setting(dummy_extractor, mock_video_file):
    created = []

    class _Extractor(_DummyExtractor):
        def __init__(self, settings=None, backend=None):
            created.append(settings)
            super().__init__(settings, backend)

    ctx = types.SimpleNamespace(obj={"verbose": False})
    with pytest.raises(SystemExit) as excinfo:
        cli_commands.run_extract_command(
            ctx=ctx,
            logger=logging.getLogger("test"),
            video=str(mock_video_file),
            output=None,
            fmt=None,
            settings=ExtractionSettings(language="jpn"),
            backend="tesseract",
            no_progress=True,
            show_cues=False,
            extractor_cls=_Extractor,
        )
    assert excinfo.value.code == 1
    assert created == []


def test_extract_normalizes_language_setting(dummy_extractor, mock_video_file):
    ctx = types.SimpleNamespace(obj={"verbose": False})
    cli_commands.run_extract_command(
        ctx=ctx,
        logger=logging.getLogger("test"),
        video=str(mock_video_file),
        output=None,
        fmt=None,
        settings=ExtractionSettings(language=" DEU "),
        backend="tesseract",
        no_progress=True,
        show_cues=False,
        extractor_cls=dummy_extractor,
        write_fn=lambda cues, path, fmt: path,
    )
    assert dummy_extractor.last_instance.settings.language == "deu"
