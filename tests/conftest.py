import os
import subprocess

import matplotlib

matplotlib.use("Agg")

import pandas as pd  # noqa: E402
import pytest  # noqa: E402

import frameplot.services.encoding as encoding  # noqa: E402
from frameplot.visuals import Layer, Plot  # noqa: E402
from frameplot.visuals.io import savers  # noqa: E402

@pytest.fixture
def small():
    """Tiny frames keep rendering fast."""
    return {"dpi": 20, "figsize": (3, 2)}


@pytest.fixture(autouse=True)
def private_tmp(tmp_path, monkeypatch):
    temp_dir = str(tmp_path / "frameplot-tmp")
    monkeypatch.setattr(savers, "TEMP_DIR", temp_dir)
    return temp_dir


@pytest.fixture
def measurements():
    dates = pd.date_range("1973-01-01", periods=359, freq="D")[::-1]
    return pd.DataFrame(
        {"date": dates.strftime("%Y-%m-%d"), "aqi": range(359)}
    )


@pytest.fixture
def framed_df():
    return pd.DataFrame(
        {
            "x": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
            "y": [10.0, 20.0, 30.0, 40.0, 50.0, 60.0],
            "year": [1, 1, 2, 2, 3, 3],
        }
    )


@pytest.fixture
def framed_plot(framed_df):
    return Plot(title="Points").add(Layer(framed_df, x="x", y="y", frame="year"))


class FakeTools:
    """Stands in for ffmpeg, convert and pdflatex."""

    def __init__(self, returncode=0):
        self.calls = []
        self.returncode = returncode

    def __call__(self, cmd, capture_output=False, text=False, cwd=None, **kwargs):
        self.calls.append(list(cmd))
        if self.returncode != 0:
            return subprocess.CompletedProcess(cmd, self.returncode, "", "boom")
        if os.path.basename(cmd[0]).startswith("pdflatex"):
            stem = os.path.splitext(cmd[-1])[0]
            out = os.path.join(cwd, stem + ".pdf")
            with open(out, "wb") as f:
                f.write(b"%PDF-1.5 fake")
        else:
            with open(cmd[-1], "wb") as f:
                f.write(b"GIF89a fake")
        return subprocess.CompletedProcess(cmd, 0, "", "")


@pytest.fixture
def fake_tools(monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(encoding.subprocess, "run", tools)
    return tools


@pytest.fixture
def failing_tools(monkeypatch):
    tools = FakeTools(returncode=1)
    monkeypatch.setattr(encoding.subprocess, "run", tools)
    return tools
