"""Tests for the MD3 dump CLI."""
import os
import subprocess
import sys
import tempfile
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from md3_fixtures import build_md3

TOOL_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def run_cli(*args, input=None):
    return subprocess.run(
        [sys.executable, "dump_md3.py", *args],
        capture_output=True,
        input=input,
        cwd=TOOL_DIR,
    )


def test_cli_help():
    """CLI should show help."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert b"usage" in result.stdout.lower()


def test_cli_dump_file():
    """CLI should dump a file given as argument."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_path = os.path.join(tmpdir, "box.md3")
        with open(input_path, "wb") as f:
            f.write(build_md3([((64, 0, 0), 0)]))

        result = run_cli(input_path)

    assert result.returncode == 0
    lines = result.stdout.decode().splitlines()
    assert lines[0] == "Magic = 'IDP3'"
    assert "Frame 0" in lines
    assert "Surface 0" in lines
    assert lines[-2:] == [" Vertex = [1 0 0]", " Normal = [0 0 1]"]


def test_cli_dump_stdin():
    """CLI should read standard input when no file is given."""
    result = run_cli(input=build_md3([((64, 0, 0), 0)]))

    assert result.returncode == 0
    assert b"Surface 0" in result.stdout


def test_cli_missing_file():
    result = run_cli("does-not-exist.md3")

    assert result.returncode == 1
    assert b"Error" in result.stderr
    assert result.stdout == b""


def test_cli_truncated_file():
    """Truncated surfaces exit non-zero after the frames are printed."""
    data = build_md3([((0, 0, 0), 0)])
    result = run_cli(input=data[: 0xA4 + 50])

    assert result.returncode == 1
    assert b"Frame 0" in result.stdout
    assert b"Surface" not in result.stdout
    assert b"Error" in result.stderr


def test_cli_strict_flag():
    data = build_md3([((0, 0, 0), 0)], surface_name=b"S" * 64)

    assert run_cli(input=data).returncode == 0
    result = run_cli("--strict", input=data)
    assert result.returncode == 1
    assert b"Unterminated" in result.stderr


def test_cli_tags_and_shaders_flags():
    data = build_md3(
        [((0, 0, 0), 0)],
        shaders=[(b"textures/box", 0)],
        tags=[(b"tag_head", (0.0, 0.0, 0.0), ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)))],
    )
    result = run_cli("--tags", "--shaders", input=data)

    assert result.returncode == 0
    lines = result.stdout.decode().splitlines()
    assert "Tag 0" in lines
    assert " Shader 0" in lines


def test_cli_gltf_export():
    data = build_md3(
        [((0, 0, 0), 0), ((64, 0, 0), 0), ((0, 64, 0), 0)],
        triangles=[(0, 1, 2)],
    )

    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = os.path.join(tmpdir, "box.glb")
        result = run_cli("--gltf", output_path, "-v", input=data)

        assert result.returncode == 0
        assert os.path.exists(output_path)
        assert b"Exported" in result.stderr


def test_cli_gltf_bad_triangle_index():
    data = build_md3(
        [((0, 0, 0), 0), ((64, 0, 0), 0), ((0, 64, 0), 0)],
        triangles=[(0, 1, -1)],
    )

    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = os.path.join(tmpdir, "box.glb")
        result = run_cli("--gltf", output_path, input=data)

    assert result.returncode == 1
    assert b"Error" in result.stderr
    assert b"Traceback" not in result.stderr
