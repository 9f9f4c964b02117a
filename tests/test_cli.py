"""Tests for the script and render command lines."""

from unittest.mock import patch

import pytest

from reelcompose import cli, script_cli
from reelcompose.capture import Artifact
from reelcompose.manifest import dump_script_manifest, load_script_manifest


@pytest.fixture
def manifest(tmp_path, product_image, short_timeline):
    path = tmp_path / "script.yaml"
    dump_script_manifest(path, short_timeline, image=str(product_image), caption="Legenda")
    return path


class TestScriptCli:
    def test_writes_loadable_manifest(self, tmp_path, capsys):
        out = tmp_path / "script.yaml"
        script_cli.main([
            "--network", "tiktok",
            "--product", "Garrafa Térmica",
            "--benefits", "mantém gelado, leve",
            "--image", "/data/photo.jpg",
            "--output", str(out),
        ])
        config = load_script_manifest(out)
        assert config["image"] == "/data/photo.jpg"
        assert len(config["timeline"]) == 4
        assert config["timeline"].total_duration == pytest.approx(22)
        assert config["hashtags"][0] == "#garrafa"
        assert config["caption"].startswith("Garrafa Térmica por")

        printed = capsys.readouterr().out
        assert "TikTok Short: 4 segments" in printed
        assert f"Done: {out}" in printed

    def test_unknown_network_rejected(self, tmp_path):
        with pytest.raises(SystemExit):
            script_cli.main([
                "--network", "myspace", "--product", "X",
                "--image", "a.jpg", "--output", str(tmp_path / "s.yaml"),
            ])

    def test_blank_product_rejected(self, tmp_path):
        with pytest.raises(SystemExit):
            script_cli.main([
                "--product", "  ", "--image", "a.jpg",
                "--output", str(tmp_path / "s.yaml"),
            ])


class TestRenderCli:
    def test_validate_only(self, manifest, capsys):
        cli.main(["--manifest", str(manifest), "--validate"])
        out = capsys.readouterr().out
        assert "Manifest valid: 2 segments, 1.0s" in out
        assert "Image path verified." in out

    def test_validate_missing_image(self, tmp_path, short_timeline):
        path = tmp_path / "script.yaml"
        dump_script_manifest(path, short_timeline, image=str(tmp_path / "gone.png"))
        with pytest.raises(FileNotFoundError, match="Image not found"):
            cli.main(["--manifest", str(path), "--validate"])

    def test_output_required(self, manifest):
        with pytest.raises(SystemExit):
            cli.main(["--manifest", str(manifest)])

    def test_fps_must_be_positive(self, manifest, tmp_path):
        with pytest.raises(SystemExit):
            cli.main(["--manifest", str(manifest), "--output", str(tmp_path / "o.webm"), "--fps", "0"])

    def test_script_only_when_encoding_unavailable(self, manifest, tmp_path, capsys):
        with patch("reelcompose.cli.compose", return_value=None) as compose:
            result = cli.render(str(manifest), str(tmp_path / "o.webm"))
        assert result is None
        compose.assert_called_once()
        out = capsys.readouterr().out
        assert "Script: 2 segments" in out
        assert "Caption:\nLegenda" in out
        assert "script only" in out

    def test_overrides_passed_to_compose(self, manifest, tmp_path, capsys):
        out_path = tmp_path / "o.webm"
        artifact = Artifact(data=b"x", mime_type="video/webm", path=out_path)
        with patch("reelcompose.cli.compose", return_value=artifact) as compose, \
                patch("reelcompose.cli.probe_duration", return_value=1.0):
            result = cli.render(str(manifest), str(out_path), orientation="landscape", fps=12)
        assert result == str(out_path)
        args, kwargs = compose.call_args
        assert args[2] == "landscape"
        assert kwargs["settings"].fps == 12
        assert kwargs["output"] == str(out_path)
        assert f"Done: {out_path}" in capsys.readouterr().out

    def test_done_reported_when_read_back_fails(self, manifest, tmp_path, capsys):
        out_path = tmp_path / "o.webm"
        artifact = Artifact(data=b"x", mime_type="video/webm", path=out_path)
        with patch("reelcompose.cli.compose", return_value=artifact), \
                patch("reelcompose.cli.probe_duration", side_effect=OSError("unreadable")):
            result = cli.render(str(manifest), str(out_path))
        assert result == str(out_path)
        out = capsys.readouterr().out
        assert "Could not read back video duration: unreadable" in out
        assert f"Done: {out_path}" in out
